# Overview: Flask API routes for inter-shop offers.

from flask import Blueprint, request, jsonify, g, current_app

from ..services import offer_service
from ..services.offer_service import OfferError, OfferNotFoundError, OfferStateError
from ..decorators import require_auth, require_permission


offers_bp = Blueprint("offers", __name__, url_prefix="/api/offers")


@offers_bp.post("/")
@require_auth
@require_permission("CREATE_OFFER")
def create_offer_route():
    try:
        offer = offer_service.create_offer(request.get_json(silent=True), g.actor.id)
    except OfferError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"offer": offer.to_dict()}), 201


@offers_bp.get("/")
@require_auth
@require_permission("REVIEW_OFFERS")
def list_offers_route():
    offers = offer_service.list_offers(request.args.get("status"))
    return jsonify({"offers": [o.to_dict() for o in offers]}), 200


@offers_bp.put("/<int:offer_id>")
@require_auth
@require_permission("REVIEW_OFFERS")
def review_offer_route(offer_id: int):
    """Approve or reject a pending offer. Body: {"status": "approved" | "rejected"}"""
    data = request.get_json(silent=True) or {}
    try:
        offer = offer_service.review_offer(offer_id, data.get("status"), g.actor.id)
    except OfferNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except OfferStateError as e:
        return jsonify({"error": str(e)}), 409
    except OfferError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to review offer")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info("Offer %s %s by %s", offer.id, offer.status, g.actor.id)
    return jsonify({"offer": offer.to_dict()}), 200
