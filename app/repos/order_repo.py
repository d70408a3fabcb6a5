# app/repos/order_repo.py
from typing import Iterable, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        #bez commita - transakcja nalezy do CheckoutService
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def reload_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id, populate_existing=True)

    def get_order_items(self, order_id: int) -> List[OrderItemModel]:
        #swiezy odczyt w transakcji, product_id moglo zostac wyzerowane po usunieciu produktu
        stmt = (
            select(OrderItemModel)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.id)
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_user_orders(self, user_id: int) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_orders(self, status: str | None = None) -> List[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if status:
            stmt = stmt.where(OrderModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order_id: int, status: str, from_statuses: Iterable[str]) -> int:
        # warunek na aktualny status, jak w optimistic locking
        # UPDATE orders SET status = 'cancelled' WHERE id = 1 AND status IN ('pending', ...)
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status.in_(list(from_statuses)))
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_order(self, order: OrderModel) -> None:
        self.db.delete(order)
        self.db.commit()

    def commit(self) -> None:
        self.db.commit()
