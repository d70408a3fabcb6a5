from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, List
from sqlalchemy.orm import Session
from app.data.models.cart_item import CartItemModel
from app.domain.errors import InsufficientStockError, NotFoundError
from app.repos.cart_repo import CartRepo
from app.services.inventory_service import InventoryService
from app.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class CartService:
    """
    Koszyk uzytkownika = pozycje (user_id, product_id) -> quantity
    query (get_user_cart, validate_cart_stock, get_cart_count) tylko odczyt
    commands (add, update, remove, clear) modyfikuja stan

    Metody agregatu nie sprawdzaja stanu magazynu, robia to add_to_cart
    i update_cart_item (wywolania z API) przez InventoryService.
    Ceny w koszyku zawsze aktualne z produktu, to nie jest snapshot.
    """

    def __init__(self, db: Session, inventory: InventoryService | None = None):
        self.repo = CartRepo(db)
        self.inventory = inventory or InventoryService(db)

    #query - odczyt
    def get_user_cart(self, user_id: int) -> Dict[str, Any]:
        items = self.repo.get_cart_items(user_id)
        lines = [self._line_to_dict(i) for i in items]

        subtotal = _money(sum((i.product.price * i.quantity for i in items), Decimal("0.00")))
        total_items = sum(i.quantity for i in items)

        #dict przeksztalcany w jsona
        return {
            "items": lines,
            "summary": {
                "total_items": total_items,
                "subtotal": subtotal,
                #bez podatkow i wysylki
                "estimated_total": subtotal,
            },
        }

    def validate_cart_stock(self, user_id: int) -> Dict[str, Any]:
        invalid_items: List[Dict[str, Any]] = []

        for item in self.repo.get_cart_items(user_id):
            if item.product.stock < item.quantity:
                invalid_items.append(
                    {
                        "product_id": item.product_id,
                        "product_name": item.product.name,
                        "requested_quantity": item.quantity,
                        "available_stock": item.product.stock,
                    }
                )

        return {"valid": not invalid_items, "invalid_items": invalid_items}

    def get_cart_count(self, user_id: int) -> int:
        return self.repo.count_items(user_id)

    #commands - agregat
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any] | None:
        existing = self.repo.get_cart_item(user_id, product_id)

        if existing:
            logger.info(
                f"Produkt {product_id} juz jest w koszyku uzytkownika {user_id}, zwiekszam ilosc "
                f"z {existing.quantity} do {existing.quantity + quantity}"
            )
            return self.update_quantity(user_id, product_id, existing.quantity + quantity)

        logger.info(f"Dodaje nowy produkt {product_id} do koszyka uzytkownika {user_id}")
        item = self.repo.add_cart_item(
            CartItemModel(
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
            )
        )
        self.repo.commit()
        self.repo.refresh(item)
        return self._line_to_dict(item)

    def update_quantity(self, user_id: int, product_id: int, new_quantity: int) -> Dict[str, Any] | None:
        #pozycja z iloscia <= 0 nie moze istniec
        if new_quantity <= 0:
            self.remove_item(user_id, product_id)
            return None

        item = self.repo.get_cart_item(user_id, product_id)
        if not item:
            return None

        item.quantity = new_quantity
        self.repo.commit()
        self.repo.refresh(item)

        logger.info(f"Ilosc produktu {product_id} w koszyku uzytkownika {user_id} = {new_quantity}")
        return self._line_to_dict(item)

    def remove_item(self, user_id: int, product_id: int) -> bool:
        removed = self.repo.delete_cart_item(user_id, product_id)
        self.repo.commit()

        logger.info(f"Usuniecie produktu {product_id} z koszyka uzytkownika {user_id}: {removed}")
        return removed > 0

    def clear_cart(self, user_id: int) -> int:
        removed = self.repo.clear_cart(user_id)
        self.repo.commit()

        logger.info(f"Wyczyszczono koszyk uzytkownika {user_id}, usunieto {removed} pozycji")
        return removed

    #tylko w transakcji checkoutu, bez commita
    def lock_cart(self, user_id: int) -> List[CartItemModel]:
        return self.repo.lock_cart_items(user_id)

    def consume_cart(self, user_id: int) -> int:
        """Usuwa pozycje bez commita - tylko w transakcji checkoutu."""
        return self.repo.clear_cart(user_id)

    #commands - wywolania z API, ze sprawdzeniem stanu magazynu
    def add_to_cart(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        existing = self.repo.get_cart_item(user_id, product_id)
        requested = quantity + (existing.quantity if existing else 0)

        self._ensure_available(product_id, requested)

        return self.add_item(user_id, product_id, quantity)

    def update_cart_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any] | None:
        if quantity > 0:
            if not self.repo.get_cart_item(user_id, product_id):
                raise NotFoundError("Produktu nie ma w koszyku")
            self._ensure_available(product_id, quantity)

        return self.update_quantity(user_id, product_id, quantity)

    def _ensure_available(self, product_id: int, quantity: int) -> None:
        #NotFoundError jesli produkt nie istnieje
        check = self.inventory.check_availability(product_id, quantity)

        if not check["available"]:
            raise InsufficientStockError(
                [
                    {
                        "product_id": product_id,
                        "requested_quantity": quantity,
                        "available_stock": check["current_stock"],
                    }
                ],
                message=(
                    f"Niewystarczajacy stan. Dostepne: {check['current_stock']}, "
                    f"zadane: {quantity}"
                ),
            )

    @staticmethod
    def _line_to_dict(item: CartItemModel) -> Dict[str, Any]:
        product = item.product
        price = Decimal(product.price)
        return {
            "id": item.id,
            "user_id": item.user_id,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "product": {
                "id": product.id,
                "name": product.name,
                "price": price,
                "stock": product.stock,
                "image_url": product.image_url,
            },
            "line_total": _money(price * item.quantity),
            "available": product.stock >= item.quantity,
        }
