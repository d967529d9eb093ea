from flask import Blueprint, Response, current_app, jsonify, request

from shoppos.decorators import require_auth, require_permission
from shoppos.services import reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
@require_auth
@require_permission("VIEW_REPORTS")
def dashboard():
    report = reporting_service.dashboard(
        low_stock_threshold=current_app.config.get("LOW_STOCK_THRESHOLD", 10),
    )
    return jsonify(report), 200


@reports_bp.get("/sales")
@require_auth
@require_permission("VIEW_REPORTS")
def sales_report():
    try:
        report = reporting_service.sales_report(
            start=request.args.get("from"),
            end=request.args.get("to"),
        )
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/top-products")
@require_auth
@require_permission("VIEW_REPORTS")
def top_products():
    limit = request.args.get("limit", 10, type=int)
    try:
        products = reporting_service.top_products(limit=limit)
        return jsonify({"products": products}), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/cashier-performance")
@require_auth
@require_permission("VIEW_REPORTS")
def cashier_performance():
    try:
        report = reporting_service.cashier_performance(
            start=request.args.get("from"),
            end=request.args.get("to"),
        )
        return jsonify({"cashiers": report}), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/export-csv")
@require_auth
@require_permission("VIEW_REPORTS")
def export_csv():
    start = request.args.get("from")
    end = request.args.get("to")
    try:
        body = reporting_service.export_sales_csv(start=start, end=end)
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=sales_{start}_to_{end}.csv"},
    )
