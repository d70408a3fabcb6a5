from decimal import Decimal

import pytest

from app.data.models import OrderItemModel, OrderModel, OrderStatus
from app.domain.errors import ForbiddenError, InvalidStateTransitionError, NotFoundError, ValidationError
from app.services.order_service import OrderService, can_be_cancelled, can_transition, order_to_dict


@pytest.fixture()
def customer(shop):
    return shop.user()


@pytest.fixture()
def order(db, shop, customer):
    product = shop.product(name="A", price="10.00", stock=10)
    created = OrderService(db).create_from_cart_snapshot(
        customer.id,
        [{"product_id": product.id, "product_name": "A", "quantity": 3, "price": Decimal("10.00")}],
        "Adres 1",
    )
    db.commit()
    return created


class TestTransitionTable:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "processing"),
            ("pending", "delivered"),
            ("processing", "shipped"),
            ("shipped", "delivered"),
            ("shipped", "cancelled"),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            ("shipped", "processing"),
            ("delivered", "cancelled"),
            ("delivered", "shipped"),
            ("cancelled", "pending"),
            ("processing", "pending"),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target)

    def test_cancellable_statuses(self):
        assert [s.value for s in OrderStatus if can_be_cancelled(s.value)] == ["pending", "processing", "shipped"]


class TestCreateFromCartSnapshot:
    def test_header_and_lines(self, order, customer, shop):
        data = order_to_dict(order)

        assert data["user_id"] == customer.id
        assert data["status"] == "pending"
        assert data["total_price"] == Decimal("30.00")
        assert data["items"][0]["quantity"] == 3
        assert data["items"][0]["line_total"] == Decimal("30.00")
        assert shop.count(OrderItemModel) == 1


class TestUpdateStatus:
    def test_moves_forward(self, db, shop, order):
        data = OrderService(db).update_status(order.id, OrderStatus.SHIPPED)

        assert data["status"] == "shipped"
        assert shop.status(order.id) == "shipped"

    def test_same_status_is_noop(self, db, order):
        data = OrderService(db).update_status(order.id, OrderStatus.PENDING)

        assert data["status"] == "pending"

    def test_cannot_go_back(self, db, shop, order):
        svc = OrderService(db)
        svc.update_status(order.id, OrderStatus.SHIPPED)

        with pytest.raises(InvalidStateTransitionError):
            svc.update_status(order.id, OrderStatus.PROCESSING)

    def test_delivered_is_terminal(self, db, shop, order):
        svc = OrderService(db)
        svc.update_status(order.id, OrderStatus.DELIVERED)

        with pytest.raises(InvalidStateTransitionError):
            svc.update_status(order.id, OrderStatus.DELIVERED)

    def test_cancelled_is_refused_without_compensation(self, db, shop, order):
        product_id = order.items[0].product_id

        with pytest.raises(ValidationError):
            OrderService(db).update_status(order.id, OrderStatus.CANCELLED)

        assert shop.status(order.id) == "pending"
        assert shop.stock(product_id) == 10

    def test_unknown_order(self, db):
        with pytest.raises(NotFoundError):
            OrderService(db).update_status(999, OrderStatus.SHIPPED)


class TestShippingAddress:
    def test_update_while_pending(self, db, customer, order):
        data = OrderService(db).update_shipping_address(order.id, " Nowy 2 ", customer.id, "customer")

        assert data["shipping_address"] == "Nowy 2"

    @pytest.mark.parametrize("status", ["shipped", "delivered"])
    def test_locked_after_shipping(self, db, shop, customer, order, status):
        shop.set_status(order.id, status)

        with pytest.raises(InvalidStateTransitionError):
            OrderService(db).update_shipping_address(order.id, "Nowy 2", customer.id, "customer")

    def test_blank_address(self, db, customer, order):
        with pytest.raises(ValidationError):
            OrderService(db).update_shipping_address(order.id, "  ", customer.id, "customer")

    def test_other_customer_forbidden(self, db, shop, order):
        stranger = shop.user(name="Obcy")

        with pytest.raises(ForbiddenError):
            OrderService(db).update_shipping_address(order.id, "Nowy 2", stranger.id, "customer")


class TestQueries:
    def test_get_order_checks_owner(self, db, shop, customer, order):
        svc = OrderService(db)
        stranger = shop.user(name="Obcy")

        assert svc.get_order(order.id, customer.id, "customer")["id"] == order.id
        assert svc.get_order(order.id, stranger.id, "admin")["id"] == order.id
        with pytest.raises(ForbiddenError):
            svc.get_order(order.id, stranger.id, "customer")

    def test_user_orders_and_status_filter(self, db, shop, customer, order):
        svc = OrderService(db)

        assert [o["id"] for o in svc.get_user_orders(customer.id)] == [order.id]
        assert [o["id"] for o in svc.list_orders(OrderStatus.PENDING)] == [order.id]
        assert svc.list_orders(OrderStatus.SHIPPED) == []
        assert len(svc.list_orders()) == 1


class TestDeleteOrder:
    def test_deletes_lines_with_order(self, db, shop, order):
        OrderService(db).delete_order(order.id)

        assert shop.count(OrderModel) == 0
        assert shop.count(OrderItemModel) == 0

    def test_unknown_order(self, db):
        with pytest.raises(NotFoundError):
            OrderService(db).delete_order(999)
