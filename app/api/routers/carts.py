#app/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import ensure_self_or_admin, get_current_user
from app.data.database import get_db
from app.domain.errors import ShopError
from app.domain.schemas import (
    CartCountOut,
    CartItemIn,
    CartItemOut,
    CartItemUpdate,
    CartOut,
    CartRemovedOut,
    CartValidationOut,
    Principal,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.post("/", response_model=CartItemOut, status_code=201)
def add_item(
    payload: CartItemIn,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_to_cart(
            user_id=user.id,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.get("/", response_model=CartOut)
def get_cart(
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_user_cart(user.id)


@router.get("/utils/count", response_model=CartCountOut)
def get_cart_count(
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"total_items": get_service(db).get_cart_count(user.id)}


@router.get("/utils/validate", response_model=CartValidationOut)
def validate_cart(
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).validate_cart_stock(user.id)


@router.get("/{user_id}", response_model=CartOut)
def get_user_cart(
    user_id: int,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_self_or_admin(user, user_id)
    return get_service(db).get_user_cart(user_id)


@router.put("/", response_model=CartItemOut | CartRemovedOut)
def update_item(
    payload: CartItemUpdate,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)

    #ilosc 0 = usuniecie pozycji
    if payload.quantity == 0:
        if not svc.remove_item(user.id, payload.product_id):
            raise HTTPException(status_code=404, detail="Produktu nie ma w koszyku")
        return {"removed": 1}

    try:
        return svc.update_cart_item(user.id, payload.product_id, payload.quantity)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.delete("/{product_id}", response_model=CartRemovedOut)
def remove_item(
    product_id: int,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not get_service(db).remove_item(user.id, product_id):
        raise HTTPException(status_code=404, detail="Produktu nie ma w koszyku")
    return {"removed": 1}


@router.delete("/", response_model=CartRemovedOut)
def clear_cart(
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"removed": get_service(db).clear_cart(user.id)}
