# Overview: SQLAlchemy-backed SaleStore used by the sale transaction processor.

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Item, Sale
from .sale_processor import ItemStock, StoreError


# The sqlite3 driver raises OverflowError itself for out-of-range
# parameters, without the SQLAlchemy wrapper
DRIVER_ERRORS = (SQLAlchemyError, OverflowError)


class SqlAlchemySaleStore:
    """
    SaleStore over a SQLAlchemy session.

    The session autobegins its transaction on the first statement, so
    begin() only checks that nothing else is pending in the unit of work.
    The guarded UPDATE takes the row's write lock; concurrent sales for the
    same item serialize on it and the loser sees zero affected rows.
    """

    def __init__(self, session: Session):
        self.session = session

    def begin(self) -> None:
        if self.session.new or self.session.dirty or self.session.deleted:
            raise StoreError("Session has uncommitted changes; refusing to start a sale")

    def commit(self) -> None:
        try:
            self.session.commit()
        except DRIVER_ERRORS as exc:
            raise StoreError(str(exc)) from exc

    def rollback(self) -> None:
        self.session.rollback()

    def conditional_decrement(self, item_id: int, qty: int) -> int:
        stmt = (
            update(Item)
            .where(Item.id == item_id, Item.quantity >= qty)
            .values(quantity=Item.quantity - qty)
            .execution_options(synchronize_session=False)
        )
        try:
            return self.session.execute(stmt).rowcount
        except DRIVER_ERRORS as exc:
            raise StoreError(str(exc)) from exc

    def lookup(self, item_id: int) -> ItemStock | None:
        stmt = select(Item.id, Item.quantity, Item.name, Item.price_cents).where(Item.id == item_id)
        try:
            row = self.session.execute(stmt).first()
        except DRIVER_ERRORS as exc:
            raise StoreError(str(exc)) from exc
        if row is None:
            return None
        return ItemStock(id=row.id, quantity=row.quantity, name=row.name, price_cents=row.price_cents)

    def insert_sale(self, record: dict) -> dict:
        sale = Sale(**record)
        try:
            self.session.add(sale)
            self.session.flush()
        except DRIVER_ERRORS as exc:
            raise StoreError(str(exc)) from exc
        return sale.to_dict()
