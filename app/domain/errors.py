# app/domain/errors.py
from typing import Any, Dict, List


class ShopError(Exception):
    """Bazowy blad domeny, status_code mapowany na odpowiedz HTTP w routerach."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def detail(self) -> Any:
        return self.message


class ValidationError(ShopError):
    status_code = 400


class EmptyCartError(ShopError):
    status_code = 400

    def __init__(self, message: str = "Nie mozna zlozyc zamowienia z pustego koszyka"):
        super().__init__(message)


class NotFoundError(ShopError):
    status_code = 404


class ForbiddenError(ShopError):
    status_code = 403


class InsufficientStockError(ShopError):
    status_code = 400

    def __init__(self, invalid_items: List[Dict[str, Any]], message: str = "Niewystarczajacy stan magazynowy"):
        super().__init__(message)
        self.invalid_items = invalid_items

    def detail(self) -> Any:
        return {"message": self.message, "invalid_items": self.invalid_items}


class InvalidStateTransitionError(ShopError):
    status_code = 409

    def __init__(self, current_status: str, message: str):
        super().__init__(message)
        self.current_status = current_status

    def detail(self) -> Any:
        return {"message": self.message, "current_status": self.current_status}


class TransactionError(ShopError):
    """Blad bazy w trakcie transakcji checkout/cancel, zawsze po rollbacku."""

    status_code = 500

    def __init__(self, message: str = "Transakcja nie powiodla sie"):
        super().__init__(message)
