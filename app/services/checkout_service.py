# app/services/checkout_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.order import OrderStatus
from app.domain.errors import (
    EmptyCartError,
    ForbiddenError,
    InsufficientStockError,
    InvalidStateTransitionError,
    NotFoundError,
    TransactionError,
    ValidationError,
)
from app.repos.order_repo import OrderRepo
from app.services.cart_service import CartService
from app.services.inventory_service import InventoryService
from app.services.notification_service import ORDER_CANCELLED, ORDER_PLACED, NotificationService
from app.services.order_service import OrderService, can_be_cancelled, cancellable_statuses, order_to_dict
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Koszyk -> zamowienie i anulowanie zamowienia, wszystko albo nic.

    Jedna transakcja bazy na operacje:
    - place_order: naglowek + pozycje + zmniejszenie stanow + usuniecie koszyka
    - cancel_order: status cancelled + zwrot stanow
    Kazdy wyjatek w srodku = rollback, potem wyjatek leci dalej.
    Bledy domenowe (pusty koszyk, brak towaru, zly status) sprawdzane
    przed wejsciem w transakcje, ale warunkowe UPDATE w srodku i tak
    pilnuja stanu przy rownoleglych zamowieniach.
    Nic nie jest ponawiane automatycznie.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.inventory = InventoryService(db)
        self.cart_service = CartService(db, inventory=self.inventory)
        self.order_service = OrderService(db)
        self.order_repo = OrderRepo(db)
        self.notification_service = notification_service or NotificationService()

    def place_order(self, user_id: int, shipping_address: str) -> Dict[str, Any]:
        address = (shipping_address or "").strip()
        if not address:
            raise ValidationError("Adres dostawy jest wymagany")

        cart = self.cart_service.get_user_cart(user_id)
        if not cart["items"]:
            raise EmptyCartError()

        validation = self.cart_service.validate_cart_stock(user_id)
        if not validation["valid"]:
            logger.warning(f"Checkout uzytkownika {user_id} odrzucony, brak towaru: {validation['invalid_items']}")
            raise InsufficientStockError(validation["invalid_items"])

        logger.info(f"Checkout uzytkownika {user_id}, pozycji: {len(cart['items'])}")

        try:
            #koszyk czytany jeszcze raz pod lockiem, pozycje zamowienia tylko z tego odczytu
            cart_items = self.cart_service.lock_cart(user_id)
            if not cart_items:
                raise EmptyCartError()

            #blokada wierszy produktow, ceny czytane juz pod lockiem
            locked = {p.id: p for p in self.inventory.lock_products([i.product_id for i in cart_items])}

            lines = []
            for item in cart_items:
                product = locked.get(item.product_id)
                if product is None:
                    raise NotFoundError(f"Produkt {item.product_id} nie istnieje")
                lines.append(
                    {
                        "product_id": product.id,
                        "product_name": product.name,
                        "quantity": item.quantity,
                        "price": Decimal(product.price),
                    }
                )

            order = self.order_service.create_from_cart_snapshot(user_id, lines, address)

            for line in lines:
                #InsufficientStockError jesli ktos wykupil towar po walidacji
                self.inventory.decrement(line["product_id"], line["quantity"])

            #mniej usunietych pozycji = rownolegly checkout zuzyl juz ten koszyk
            removed = self.cart_service.consume_cart(user_id)
            if removed != len(lines):
                raise EmptyCartError("Koszyk zostal juz zamieniony na zamowienie")

            self.db.commit()

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Checkout uzytkownika {user_id} - blad bazy, rollback")
            raise TransactionError() from e
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Checkout uzytkownika {user_id} przerwany, rollback: {e}")
            raise

        logger.info(f"Order {order.id} created for user {user_id}, total {order.total_price}")

        self._notify(user_id, order.id, ORDER_PLACED)

        return order_to_dict(order)

    def cancel_order(self, order_id: int, caller_id: int | None, caller_role: str) -> Dict[str, Any]:
        order = self.order_service.get_order_model(order_id)

        if caller_role != "admin" and order.user_id != caller_id:
            raise ForbiddenError("Brak dostępu do zamówienia")

        if not can_be_cancelled(order.status):
            raise self._cannot_cancel(order.status)

        logger.info(f"Anulowanie zamowienia {order_id} (status {order.status})")

        try:
            #warunek na status w UPDATE - drugie rownolegle anulowanie dostanie 0 wierszy
            rowcount = self.order_repo.update_order_status(
                order_id,
                OrderStatus.CANCELLED.value,
                from_statuses=cancellable_statuses(),
            )
            if rowcount == 0:
                current = self.order_repo.reload_order(order_id)
                raise self._cannot_cancel(current.status if current else OrderStatus.CANCELLED.value)

            #kompensacja - zwrot towaru na stan
            for item in self.order_repo.get_order_items(order_id):
                if item.product_id is None:
                    logger.warning(f"Produkt z pozycji {item.id} zamowienia {order_id} zostal usuniety, pomijam zwrot")
                    continue
                self.inventory.increment(item.product_id, item.quantity)

            self.db.commit()

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Anulowanie zamowienia {order_id} - blad bazy, rollback")
            raise TransactionError() from e
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Anulowanie zamowienia {order_id} przerwane, rollback: {e}")
            raise

        order = self.order_repo.reload_order(order_id)

        logger.info(f"Order {order_id} cancelled")

        self._notify(order.user_id, order.id, ORDER_CANCELLED)

        return order_to_dict(order)

    @staticmethod
    def _cannot_cancel(status: str) -> InvalidStateTransitionError:
        if status == OrderStatus.CANCELLED.value:
            message = "Zamówienie jest już anulowane"
        else:
            message = f"Nie można anulować zamówienia o statusie '{status}'"
        return InvalidStateTransitionError(status, message)

    def _notify(self, user_id: int, order_id: int, event: str) -> None:
        #zamowienie jest juz zacommitowane, blad kolejki nie moze go cofnac
        try:
            self.notification_service.send_order_notification(user_id, order_id, event)
        except Exception as e:
            logger.warning(f"Nie udalo sie wyslac powiadomienia {event} dla zamowienia {order_id}: {e}")
