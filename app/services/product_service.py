# app/services/product_service.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.errors import NotFoundError
from app.domain.schemas import ProductCreate, ProductUpdate
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


def product_to_dict(product: ProductModel) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": Decimal(product.price),
        "stock": product.stock,
        "image_url": product.image_url,
        "category_id": product.category_id,
        "in_stock": product.stock > 0,
    }


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def create_product(self, payload: ProductCreate) -> Dict[str, Any]:
        product = self.repo.create_product(
            ProductModel(
                name=payload.name,
                description=payload.description,
                price=payload.price,
                stock=payload.stock,
                image_url=payload.image_url,
                category_id=payload.category_id,
            )
        )
        logger.info(f"Utworzono produkt {product.id} ({product.name})")
        return product_to_dict(product)

    def get_product(self, product_id: int) -> Dict[str, Any]:
        return product_to_dict(self._get_or_404(product_id))

    def list_products(self) -> List[Dict[str, Any]]:
        return [product_to_dict(p) for p in self.repo.list_products()]

    def update_product(self, product_id: int, payload: ProductUpdate) -> Dict[str, Any]:
        product = self._get_or_404(product_id)

        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(product, field, value)
        self.repo.commit()

        #zmiana ceny nie rusza zamowien, pozycje maja zamrozona cene
        logger.info(f"Zmieniono produkt {product_id}: {sorted(changes)}")
        return product_to_dict(product)

    def delete_product(self, product_id: int) -> None:
        product = self._get_or_404(product_id)
        self.repo.delete_product(product)

        logger.info(f"Usunieto produkt {product_id}")

    def _get_or_404(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError(f"Produkt {product_id} nie istnieje")
        return product
