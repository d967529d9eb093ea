# Overview: Service-layer operations for reporting; read-only aggregation over sales and items.

from __future__ import annotations

import csv
import io
from collections import defaultdict
from datetime import datetime
from typing import Iterable

from sqlalchemy import and_, func

from shoppos.extensions import db
from shoppos.models import Item, Sale, User
from shoppos.models.auth import ROLE_CASHIER
from shoppos.money import cents_to_str
from shoppos.time_utils import (
    parse_iso_datetime,
    parse_range_end,
    start_of_day,
    start_of_month,
    start_of_week,
    to_utc_z,
    utcnow,
)


CSV_HEADERS = ["ID", "Date", "Cashier", "Payment Method", "Bank", "Total", "Items"]


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def _parse_required_range(start: str | None, end: str | None) -> tuple[datetime, datetime]:
    if not start or not end:
        raise ReportError("From and to dates are required")
    try:
        start_dt = parse_iso_datetime(start)
        end_dt = parse_range_end(end)
    except ValueError:
        raise ReportError("from/to must be ISO-8601 dates")
    if start_dt > end_dt:
        raise ReportError("from must be before to")
    return start_dt, end_dt


def _avg(total: int, count: int) -> int:
    return int(round(total / count)) if count else 0


def _sales_between(start: datetime, end: datetime | None = None):
    query = db.session.query(Sale).filter(Sale.created_at >= start)
    if end is not None:
        query = query.filter(Sale.created_at <= end)
    return query


def _period_totals(start: datetime) -> dict:
    count, revenue = db.session.query(
        func.count(Sale.id),
        func.coalesce(func.sum(Sale.total_cents), 0),
    ).filter(Sale.created_at >= start).one()
    return {
        "transactions": int(count or 0),
        "revenue_cents": int(revenue or 0),
        "revenue": cents_to_str(int(revenue or 0)),
    }


def _payment_breakdown(start: datetime, end: datetime | None = None) -> list[dict]:
    query = db.session.query(
        Sale.payment_method,
        Sale.payment_bank,
        func.count(Sale.id).label("count"),
        func.coalesce(func.sum(Sale.total_cents), 0).label("total_cents"),
    ).filter(Sale.created_at >= start)
    if end is not None:
        query = query.filter(Sale.created_at <= end)

    rows = query.group_by(Sale.payment_method, Sale.payment_bank).order_by(
        Sale.payment_method, Sale.payment_bank
    ).all()
    return [
        {
            "payment_method": row.payment_method,
            "payment_bank": row.payment_bank,
            "count": int(row.count or 0),
            "total_cents": int(row.total_cents or 0),
            "total": cents_to_str(int(row.total_cents or 0)),
        }
        for row in rows
    ]


def aggregate_products(sales: Iterable[Sale], limit: int) -> list[dict]:
    """
    Sum sold quantity and revenue per (item id, name) from sale snapshots.

    Uses the snapshot captured at sale time, so renamed or deleted items
    still report under the name they were sold with.
    """
    totals: dict[tuple, dict] = {}
    for sale in sales:
        for line in sale.items or []:
            key = (line.get("id"), line.get("name"))
            entry = totals.setdefault(key, {
                "product_id": line.get("id"),
                "product_name": line.get("name"),
                "total_sold": 0,
                "revenue_cents": 0,
            })
            qty = int(line.get("qty") or 0)
            entry["total_sold"] += qty
            entry["revenue_cents"] += qty * int(line.get("price_cents") or 0)

    ranked = sorted(totals.values(), key=lambda e: (-e["total_sold"], -e["revenue_cents"], str(e["product_id"])))
    for entry in ranked:
        entry["revenue"] = cents_to_str(entry["revenue_cents"])
    return ranked[:limit]


def _stock_row(item: Item) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "quantity": item.quantity,
        "price_cents": item.price_cents,
        "price": cents_to_str(item.price_cents),
    }


def dashboard(*, low_stock_threshold: int = 10, now: datetime | None = None) -> dict:
    now = now or utcnow()
    today, week, month = start_of_day(now), start_of_week(now), start_of_month(now)

    low_stock = db.session.query(Item).filter(
        Item.quantity < low_stock_threshold,
        Item.quantity > 0,
    ).order_by(Item.quantity.asc(), Item.id.asc()).limit(10).all()

    out_of_stock = db.session.query(Item).filter(Item.quantity == 0).order_by(Item.name.asc()).all()

    inventory_value = int(
        db.session.query(func.coalesce(func.sum(Item.quantity * Item.price_cents), 0)).scalar() or 0
    )

    return {
        "today": _period_totals(today),
        "week": _period_totals(week),
        "month": _period_totals(month),
        "inventory": {
            "total_value_cents": inventory_value,
            "total_value": cents_to_str(inventory_value),
            "low_stock": [_stock_row(item) for item in low_stock],
            "out_of_stock": [_stock_row(item) for item in out_of_stock],
        },
        "payment_methods": _payment_breakdown(today),
        "top_products": aggregate_products(_sales_between(month).all(), limit=5),
    }


def sales_report(*, start: str | None, end: str | None) -> dict:
    start_dt, end_dt = _parse_required_range(start, end)
    sales = _sales_between(start_dt, end_dt).order_by(Sale.created_at.asc()).all()

    daily: dict[str, dict] = defaultdict(lambda: {"transaction_count": 0, "revenue_cents": 0})
    for sale in sales:
        bucket = daily[sale.created_at.date().isoformat()]
        bucket["transaction_count"] += 1
        bucket["revenue_cents"] += sale.total_cents

    total_revenue = sum(sale.total_cents for sale in sales)
    avg_order = _avg(total_revenue, len(sales))

    return {
        "start": to_utc_z(start_dt),
        "end": to_utc_z(end_dt),
        "summary": {
            "total_transactions": len(sales),
            "total_revenue_cents": total_revenue,
            "total_revenue": cents_to_str(total_revenue),
            "avg_order_value_cents": avg_order,
            "avg_order_value": cents_to_str(avg_order),
        },
        "daily_sales": [
            {
                "date": day,
                "transaction_count": bucket["transaction_count"],
                "revenue_cents": bucket["revenue_cents"],
                "revenue": cents_to_str(bucket["revenue_cents"]),
            }
            for day, bucket in sorted(daily.items())
        ],
        "payment_breakdown": _payment_breakdown(start_dt, end_dt),
    }


def top_products(*, limit: int = 10, now: datetime | None = None) -> list[dict]:
    if limit <= 0:
        raise ReportError("limit must be > 0")
    month = start_of_month(now or utcnow())
    return aggregate_products(_sales_between(month).all(), limit=limit)


def cashier_performance(*, start: str | None, end: str | None) -> list[dict]:
    start_dt, end_dt = _parse_required_range(start, end)

    rows = db.session.query(
        User.id,
        User.email,
        User.role,
        func.count(Sale.id).label("total_transactions"),
        func.coalesce(func.sum(Sale.total_cents), 0).label("total_revenue_cents"),
        func.min(Sale.created_at).label("first_sale"),
        func.max(Sale.created_at).label("last_sale"),
    ).outerjoin(
        Sale,
        and_(
            Sale.cashier_id == User.id,
            Sale.created_at >= start_dt,
            Sale.created_at <= end_dt,
        ),
    ).filter(
        User.role == ROLE_CASHIER,
    ).group_by(User.id, User.email, User.role).all()

    report = []
    for row in rows:
        count = int(row.total_transactions or 0)
        revenue = int(row.total_revenue_cents or 0)
        avg = _avg(revenue, count)
        report.append({
            "id": row.id,
            "email": row.email,
            "role": row.role,
            "total_transactions": count,
            "total_revenue_cents": revenue,
            "total_revenue": cents_to_str(revenue),
            "avg_transaction_value_cents": avg,
            "avg_transaction_value": cents_to_str(avg),
            "first_sale": to_utc_z(row.first_sale) if row.first_sale else None,
            "last_sale": to_utc_z(row.last_sale) if row.last_sale else None,
        })

    report.sort(key=lambda r: (-r["total_revenue_cents"], r["id"]))
    return report


def _items_summary(items: list[dict] | None) -> str:
    return "; ".join(f"{line.get('name') or line.get('id')} ({line.get('qty')})" for line in items or [])


def export_sales_csv(*, start: str | None, end: str | None) -> str:
    """Sales in range as CSV text, newest first."""
    start_dt, end_dt = _parse_required_range(start, end)

    rows = db.session.query(Sale, User.email).join(
        User, Sale.cashier_id == User.id
    ).filter(
        Sale.created_at >= start_dt,
        Sale.created_at <= end_dt,
    ).order_by(Sale.created_at.desc(), Sale.id.desc()).all()

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for sale, cashier_email in rows:
        writer.writerow([
            sale.id,
            to_utc_z(sale.created_at),
            cashier_email,
            sale.payment_method,
            sale.payment_bank or "N/A",
            cents_to_str(sale.total_cents),
            _items_summary(sale.items),
        ])
    return buffer.getvalue()
