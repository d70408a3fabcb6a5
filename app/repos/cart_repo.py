# app/repos/cart_repo.py
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, lazyload

from app.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_item(self, user_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_cart_items(self, user_id: int) -> List[CartItemModel]:
        #najnowsze pozycje na gorze
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().unique().all())

    def lock_cart_items(self, user_id: int) -> List[CartItemModel]:
        # SELECT ... FOR UPDATE na pozycjach koszyka, drugi checkout tego samego koszyka czeka
        # bez joina do produktu - FOR UPDATE nie przejdzie po stronie outer joina
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
            .options(lazyload(CartItemModel.product))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, user_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    def clear_cart(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    def count_items(self, user_id: int) -> int:
        total = self.db.execute(
            select(func.coalesce(func.sum(CartItemModel.quantity), 0)).where(CartItemModel.user_id == user_id)
        ).scalar_one()
        return int(total)

    def commit(self) -> None:
        self.db.commit()

    def refresh(self, item: CartItemModel) -> None:
        self.db.refresh(item)
