# app/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.errors import ShopError
from app.domain.schemas import Principal, ProductCreate, ProductOut, ProductUpdate, StockCheckOut, StockUpdate
from app.services.inventory_service import InventoryService
from app.services.product_service import ProductService, product_to_dict
from app.utils.settings import LOW_STOCK_THRESHOLD

router = APIRouter(prefix="/products", tags=["products"])


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ProductService(db).create_product(payload)


@router.get("/", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return ProductService(db).list_products()


@router.get("/admin/low-stock", response_model=List[ProductOut])
def low_stock(
    threshold: int = Query(LOW_STOCK_THRESHOLD, ge=0),
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return [product_to_dict(p) for p in InventoryService(db).low_stock(threshold)]


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.get("/{product_id}/stock", response_model=StockCheckOut)
def check_stock(
    product_id: int,
    quantity: int = Query(1, gt=0),
    db: Session = Depends(get_db),
):
    try:
        return InventoryService(db).check_availability(product_id, quantity)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.put("/{product_id}/stock", response_model=ProductOut)
def set_stock(
    product_id: int,
    payload: StockUpdate,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return product_to_dict(InventoryService(db).set_stock(product_id, payload.stock))
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).update_product(product_id, payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        ProductService(db).delete_product(product_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())
    return Response(status_code=204)
