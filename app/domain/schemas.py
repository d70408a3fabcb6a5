# app/domain/schemas.py
from pydantic import AfterValidator, BaseModel, Field, ConfigDict
from typing import Annotated, List, Literal
from decimal import Decimal
from datetime import datetime

from app.data.models.order import OrderStatus


def _strip_not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Pole nie moze byc puste")
    return value


Address = Annotated[str, Field(max_length=1000), AfterValidator(_strip_not_blank)]


# ---------- users ----------

class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class RoleUpdate(BaseModel):
    """Zmiana roli - tylko admin, rejestracja zawsze daje customer."""

    role: Literal["customer", "admin"]


class UserRead(BaseModel):
    """Schema dla użytkownika (response)."""

    id: int
    name: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class Principal(BaseModel):
    """Zalogowany uzytkownik podany przez bramke (auth jest poza serwisem)."""

    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


# ---------- products ----------

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    image_url: str | None = None
    category_id: int | None = Field(None, gt=0)


class ProductUpdate(BaseModel):
    """Czesciowa zmiana produktu. Stan magazynu tylko przez PUT /products/{id}/stock."""

    name: str = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: str | None = None
    category_id: int | None = Field(None, gt=0)

    model_config = ConfigDict(extra="forbid")


class ProductOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    stock: int
    image_url: str | None = None
    category_id: int | None = None
    in_stock: bool

    model_config = ConfigDict(from_attributes=True)


class StockUpdate(BaseModel):
    stock: int = Field(..., ge=0, description="Nowy stan magazynowy")


class StockCheckOut(BaseModel):
    product_id: int
    available: bool
    current_stock: int
    requested_quantity: int


# ---------- cart ----------

class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(1, gt=0, description="Ilość produktu (musi być > 0)")


class CartItemUpdate(BaseModel):
    """Ilosc 0 usuwa pozycje z koszyka."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0, description="Nowa ilość (0 = usunięcie)")


class CartProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    stock: int
    image_url: str | None = None


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    id: int
    user_id: int
    product_id: int
    quantity: int
    product: CartProductOut
    line_total: Decimal
    available: bool


class CartSummaryOut(BaseModel):
    total_items: int
    subtotal: Decimal
    estimated_total: Decimal


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    items: List[CartItemOut]
    summary: CartSummaryOut


class InvalidCartItemOut(BaseModel):
    product_id: int
    product_name: str
    requested_quantity: int
    available_stock: int


class CartValidationOut(BaseModel):
    valid: bool
    invalid_items: List[InvalidCartItemOut]


class CartCountOut(BaseModel):
    total_items: int


class CartRemovedOut(BaseModel):
    removed: int


# ---------- orders ----------

class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia z koszyka."""

    shipping_address: Address


class ShippingAddressUpdate(BaseModel):
    shipping_address: Address


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemOut(BaseModel):
    id: int
    product_id: int | None = None
    product_name: str
    quantity: int
    price: Decimal
    line_total: Decimal


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    user_id: int
    status: OrderStatus
    total_price: Decimal
    shipping_address: str
    can_be_cancelled: bool
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
