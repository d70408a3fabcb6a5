# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import checkout_rate_limit, ensure_self_or_admin, get_current_user, require_admin
from app.data.database import get_db
from app.data.models.order import OrderStatus
from app.domain.errors import ShopError
from app.domain.schemas import OrderCreate, OrderOut, OrderStatusUpdate, Principal, ShippingAddressUpdate
from app.services.checkout_service import CheckoutService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/", response_model=OrderOut, status_code=201, dependencies=[Depends(checkout_rate_limit)])
def create_order(
    payload: OrderCreate,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamówienie z koszyka użytkownika, zmniejsza stany i czyści koszyk.
    Wysyła powiadomienie asynchronicznie.
    """
    try:
        return CheckoutService(db).place_order(user.id, payload.shipping_address)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.get("/", response_model=List[OrderOut])
def list_orders(
    status: OrderStatus | None = Query(None),
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(status)


@router.get("/user", response_model=List[OrderOut])
def get_my_orders(
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_user_orders(user.id)


@router.get("/user/{user_id}", response_model=List[OrderOut])
def get_user_orders(
    user_id: int,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_self_or_admin(user, user_id)
    return get_service(db).get_user_orders(user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegóły zamówienia razem z pozycjami.
    """
    try:
        return get_service(db).get_order(order_id, user.id, user.role)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return CheckoutService(db).cancel_order(order_id, user.id, user.role)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.put("/{order_id}/shipping", response_model=OrderOut)
def update_shipping_address(
    order_id: int,
    payload: ShippingAddressUpdate,
    user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).update_shipping_address(order_id, payload.shipping_address, user.id, user.role)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusUpdate,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        #cancelled przez checkout - zwrot towaru na stan
        if payload.status is OrderStatus.CANCELLED:
            return CheckoutService(db).cancel_order(order_id, admin.id, admin.role)
        return get_service(db).update_status(order_id, payload.status)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.delete("/{order_id}", status_code=204)
def delete_order(
    order_id: int,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        get_service(db).delete_order(order_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())
    return Response(status_code=204)
