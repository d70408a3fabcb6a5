import pytest

from app.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from app.services.inventory_service import InventoryService


class TestCheckAvailability:
    def test_enough_stock(self, db, shop):
        product = shop.product(stock=5)

        result = InventoryService(db).check_availability(product.id, 5)

        assert result == {
            "product_id": product.id,
            "available": True,
            "current_stock": 5,
            "requested_quantity": 5,
        }

    def test_not_enough_stock(self, db, shop):
        product = shop.product(stock=2)

        result = InventoryService(db).check_availability(product.id, 3)

        assert result["available"] is False
        assert result["current_stock"] == 2

    def test_unknown_product(self, db):
        with pytest.raises(NotFoundError):
            InventoryService(db).check_availability(999, 1)


class TestDecrement:
    def test_subtracts_quantity(self, db, shop):
        product = shop.product(stock=5)

        InventoryService(db).decrement(product.id, 2)
        db.commit()

        assert shop.stock(product.id) == 3

    def test_can_drain_to_zero(self, db, shop):
        product = shop.product(stock=4)

        InventoryService(db).decrement(product.id, 4)
        db.commit()

        assert shop.stock(product.id) == 0

    def test_rejects_instead_of_clamping(self, db, shop):
        product = shop.product(name="Monitor", stock=3)

        with pytest.raises(InsufficientStockError) as exc:
            InventoryService(db).decrement(product.id, 5)
        db.rollback()

        assert exc.value.invalid_items == [
            {
                "product_id": product.id,
                "product_name": "Monitor",
                "requested_quantity": 5,
                "available_stock": 3,
            }
        ]
        assert shop.stock(product.id) == 3

    def test_unknown_product(self, db):
        with pytest.raises(NotFoundError):
            InventoryService(db).decrement(999, 1)


class TestIncrement:
    def test_adds_quantity(self, db, shop):
        product = shop.product(stock=1)

        InventoryService(db).increment(product.id, 4)
        db.commit()

        assert shop.stock(product.id) == 5

    def test_unknown_product(self, db):
        with pytest.raises(NotFoundError):
            InventoryService(db).increment(999, 1)


class TestAdminOperations:
    def test_set_stock(self, db, shop):
        product = shop.product(stock=1)

        InventoryService(db).set_stock(product.id, 40)

        assert shop.stock(product.id) == 40

    def test_set_negative_stock_rejected(self, db, shop):
        product = shop.product(stock=1)

        with pytest.raises(ValidationError):
            InventoryService(db).set_stock(product.id, -1)

    def test_low_stock_sorted_ascending(self, db, shop):
        shop.product(name="Plenty", stock=50)
        few = shop.product(name="Few", stock=3)
        none = shop.product(name="None", stock=0)

        products = InventoryService(db).low_stock(5)

        assert [p.id for p in products] == [none.id, few.id]
