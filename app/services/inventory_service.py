# app/services/inventory_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryService:
    """
    Jedyne miejsce, ktore zmienia products.stock.

    decrement/increment nie robia commita - wywolujacy (CheckoutService)
    trzyma cala operacje w jednej transakcji. Zmniejszenie stanu to
    warunkowy UPDATE (stock >= qty), przy braku towaru leci
    InsufficientStockError zamiast obcinania stanu do zera.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    #query
    def check_availability(self, product_id: int, requested_quantity: int) -> Dict[str, Any]:
        product = self._get_or_404(product_id)
        return {
            "product_id": product.id,
            "available": product.stock >= requested_quantity,
            "current_stock": product.stock,
            "requested_quantity": requested_quantity,
        }

    def low_stock(self, threshold: int) -> List[ProductModel]:
        return self.repo.get_low_stock(threshold)

    #commands (w transakcji wywolujacego)
    def lock_products(self, product_ids: List[int]) -> List[ProductModel]:
        return self.repo.lock_products(product_ids)

    def decrement(self, product_id: int, quantity: int) -> None:
        rowcount = self.repo.decrement_stock(product_id, quantity)

        if rowcount == 0:
            product = self._get_or_404(product_id)
            logger.warning(
                f"Odrzucono zmniejszenie stanu produktu {product_id}: "
                f"zadane {quantity}, dostepne {product.stock}"
            )
            raise InsufficientStockError(
                [
                    {
                        "product_id": product.id,
                        "product_name": product.name,
                        "requested_quantity": quantity,
                        "available_stock": product.stock,
                    }
                ]
            )

        logger.info(f"Stan produktu {product_id} zmniejszony o {quantity}")

    def increment(self, product_id: int, quantity: int) -> None:
        rowcount = self.repo.increment_stock(product_id, quantity)

        if rowcount == 0:
            raise NotFoundError(f"Produkt {product_id} nie istnieje")

        logger.info(f"Stan produktu {product_id} zwiekszony o {quantity}")

    #komenda admina, osobna transakcja
    def set_stock(self, product_id: int, stock: int) -> ProductModel:
        if stock < 0:
            raise ValidationError("Stan magazynowy nie moze byc ujemny")

        product = self._get_or_404(product_id)
        product.stock = stock
        self.repo.commit()

        logger.info(f"Stan produktu {product_id} ustawiony na {stock}")
        return product

    def _get_or_404(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError(f"Produkt {product_id} nie istnieje")
        return product
