# app/repos/product_repo.py
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(self) -> List[ProductModel]:
        return list(self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars().all())

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        #pozycje koszykow znikaja (CASCADE), pozycje zamowien dostaja product_id NULL
        self.db.delete(product)
        self.db.commit()

    def lock_products(self, product_ids: List[int]) -> List[ProductModel]:
        #SELECT ... FOR UPDATE, zawsze rosnaco po id zeby dwa checkouty nie zrobily deadlocka
        stmt = (
            select(ProductModel)
            .where(ProductModel.id.in_(sorted(set(product_ids))))
            .order_by(ProductModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        # UPDATE products SET stock = stock - 2 WHERE id = 1 AND stock >= 2
        # 0 rows affected = za malo towaru (albo brak produktu), nic nie jest obcinane do zera
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        self._reload(product_id)
        return result.rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        self._reload(product_id)
        return result.rowcount

    def get_low_stock(self, threshold: int) -> List[ProductModel]:
        stmt = (
            select(ProductModel)
            .where(ProductModel.stock <= threshold)
            .order_by(ProductModel.stock.asc(), ProductModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def commit(self) -> None:
        self.db.commit()

    def _reload(self, product_id: int) -> None:
        #update poza ORM - odswiez obiekt w identity map zeby nie trzymal starego stanu
        self.db.get(ProductModel, product_id, populate_existing=True)
