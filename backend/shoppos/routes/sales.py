# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/shoppos/routes/sales.py
"""Sales API routes with permission enforcement"""

from flask import Blueprint, request, jsonify, g, current_app

from ..services import sales_service
from ..services.sale_processor import SaleError, SaleErrorKind
from ..validation import ValidationError
from ..decorators import require_auth, require_permission


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


SALE_ERROR_STATUS = {
    SaleErrorKind.MALFORMED_PAYLOAD: 400,
    SaleErrorKind.ITEM_NOT_FOUND: 404,
    SaleErrorKind.INSUFFICIENT_STOCK: 409,
    SaleErrorKind.PERSISTENCE_FAILURE: 500,
}


def _sale_error_response(e: SaleError):
    status = SALE_ERROR_STATUS[e.kind]
    if e.kind is SaleErrorKind.PERSISTENCE_FAILURE:
        current_app.logger.error(
            "Sale persistence failure: actor=%s details=%s", g.actor.id, e.details, exc_info=e.__cause__
        )
        return jsonify({"error": "Failed to save sale", "kind": e.kind.value}), status

    current_app.logger.warning("Sale rejected: actor=%s kind=%s details=%s", g.actor.id, e.kind.value, e.details)
    return jsonify({"error": str(e), "kind": e.kind.value, "details": e.details}), status


@sales_bp.post("/")
@require_auth
@require_permission("CREATE_SALE")
def create_sale_route():
    """
    Create a sale: decrement stock for every line and record the sale,
    all or nothing.

    Requires: CREATE_SALE permission
    Available to: admin, cashier
    """
    try:
        sale = sales_service.create_sale(g.actor, request.get_json(silent=True))
    except SaleError as e:
        return _sale_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create sale")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info(
        "Sale %s recorded: cashier=%s lines=%d total_cents=%s",
        sale["id"], sale["cashier_id"], len(sale["items"]), sale["total_cents"],
    )
    return jsonify({"sale": sale}), 201


@sales_bp.get("/")
@require_auth
@require_permission("VIEW_SALES")
def list_sales_route():
    """
    Sales history, newest first.

    Query: payment_method, payment_bank, cashier_id, location_id,
    served_by_cashier_id, partner_cashier_id, from, to
    """
    try:
        sales = sales_service.list_sales(request.args)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"sales": [sale.to_detail_dict() for sale in sales]}), 200


@sales_bp.get("/<int:sale_id>")
@require_auth
@require_permission("VIEW_SALES")
def get_sale_route(sale_id: int):
    sale = sales_service.get_sale(sale_id)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404

    return jsonify({"sale": sale.to_detail_dict()}), 200
