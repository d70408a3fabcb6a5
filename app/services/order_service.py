# app/services/order_service.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.data.models.order import OrderModel, OrderStatus
from app.data.models.order_item import OrderItemModel
from app.domain.errors import ForbiddenError, InvalidStateTransitionError, NotFoundError, ValidationError
from app.repos.order_repo import OrderRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")

# jedna tabela przejsc dla update_status i anulowania
# delivered i cancelled sa koncowe
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

ADDRESS_LOCKED_STATUSES = {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def can_transition(current: str, target: str) -> bool:
    return OrderStatus(target) in ALLOWED_TRANSITIONS[OrderStatus(current)]


def can_be_cancelled(status: str) -> bool:
    return can_transition(status, OrderStatus.CANCELLED)


def cancellable_statuses() -> List[str]:
    return [s.value for s, targets in ALLOWED_TRANSITIONS.items() if OrderStatus.CANCELLED in targets]


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "status": order.status,
        "total_price": Decimal(order.total_price),
        "shipping_address": order.shipping_address,
        "can_be_cancelled": can_be_cancelled(order.status),
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "product_name": i.product_name,
                "quantity": i.quantity,
                "price": Decimal(i.price),
                "line_total": (Decimal(i.price) * i.quantity).quantize(CENT, rounding=ROUND_HALF_UP),
            }
            for i in order.items
        ],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Tworzenie i anulowanie w transakcji robi CheckoutService,
    tutaj odczyty, zmiany statusu i adresu.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)

    def create_from_cart_snapshot(
        self,
        user_id: int,
        lines: List[Dict[str, Any]],
        shipping_address: str,
    ) -> OrderModel:
        """
        Zapisuje naglowek (pending) i pozycje z zamrozona cena.
        lines: [{"product_id", "product_name", "quantity", "price"}, ...]
        Bez commita.
        """
        total = sum((Decimal(line["price"]) * line["quantity"] for line in lines), Decimal("0.00"))

        order = OrderModel(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            total_price=total.quantize(CENT, rounding=ROUND_HALF_UP),
            shipping_address=shipping_address,
            items=[
                OrderItemModel(
                    product_id=line["product_id"],
                    product_name=line["product_name"],
                    quantity=line["quantity"],
                    price=Decimal(line["price"]),
                )
                for line in lines
            ],
        )
        return self.repo.create_order(order)

    #query
    def get_order_model(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Zamówienie nie istnieje")
        return order

    def get_order(self, order_id: int, caller_id: int, caller_role: str) -> Dict[str, Any]:
        order = self.get_order_model(order_id)
        self._ensure_access(order, caller_id, caller_role)
        return order_to_dict(order)

    def get_user_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [order_to_dict(o) for o in self.repo.get_user_orders(user_id)]

    def list_orders(self, status: OrderStatus | None = None) -> List[Dict[str, Any]]:
        return [order_to_dict(o) for o in self.repo.list_orders(status.value if status else None)]

    #commands
    def update_status(self, order_id: int, new_status: OrderStatus) -> Dict[str, Any]:
        new_status = OrderStatus(new_status)

        #anulowanie tylko przez CheckoutService.cancel_order, ktory oddaje towar na stan
        if new_status is OrderStatus.CANCELLED:
            raise ValidationError("Anulowanie zamowienia tylko przez cancel_order")

        order = self.get_order_model(order_id)

        if order.status == new_status.value and ALLOWED_TRANSITIONS[OrderStatus(order.status)]:
            return order_to_dict(order)

        if not can_transition(order.status, new_status):
            raise InvalidStateTransitionError(
                order.status,
                f"Nie mozna zmienic statusu zamowienia z '{order.status}' na '{new_status.value}'",
            )

        order.status = new_status.value
        self.repo.commit()

        logger.info(f"Order {order.id} status -> {order.status}")
        return order_to_dict(order)

    def update_shipping_address(
        self,
        order_id: int,
        shipping_address: str,
        caller_id: int,
        caller_role: str,
    ) -> Dict[str, Any]:
        address = (shipping_address or "").strip()
        if not address:
            raise ValidationError("Adres dostawy jest wymagany")

        order = self.get_order_model(order_id)
        self._ensure_access(order, caller_id, caller_role)

        if OrderStatus(order.status) in ADDRESS_LOCKED_STATUSES:
            raise InvalidStateTransitionError(
                order.status,
                f"Nie mozna zmienic adresu dostawy zamowienia o statusie '{order.status}'",
            )

        order.shipping_address = address
        self.repo.commit()

        logger.info(f"Order {order.id} shipping address updated")
        return order_to_dict(order)

    def delete_order(self, order_id: int) -> None:
        order = self.get_order_model(order_id)
        #pozycje usuwane kaskadowo
        self.repo.delete_order(order)
        logger.info(f"Order {order_id} deleted")

    @staticmethod
    def _ensure_access(order: OrderModel, caller_id: int | None, caller_role: str) -> None:
        if caller_role != "admin" and order.user_id != caller_id:
            raise ForbiddenError("Brak dostępu do zamówienia")
