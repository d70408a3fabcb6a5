# app/data/seed.py
from decimal import Decimal

from app.data.database import SessionLocal, init_db
from app.data.models import ProductModel, UserModel

USERS = [
    {"name": "Admin", "email": "admin@shop.local", "role": "admin"},
    {"name": "Jan Kowalski", "email": "jan@shop.local", "role": "customer"},
]

PRODUCTS = [
    {"name": "Keyboard", "price": Decimal("199.99"), "stock": 25},
    {"name": "Mouse", "price": Decimal("49.50"), "stock": 100},
    {"name": "Monitor", "price": Decimal("899.00"), "stock": 5},
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            return
        db.add_all([UserModel(**u) for u in USERS])
        db.add_all([ProductModel(**p) for p in PRODUCTS])
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
