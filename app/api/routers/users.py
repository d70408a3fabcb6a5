from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.errors import ShopError
from app.services.user_service import UserService
from app.domain.schemas import Principal, RoleUpdate, UserCreate, UserRead

router = APIRouter(prefix="/users", tags=["users"])

@router.post("/", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    return service.create_user(payload)

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())

@router.put("/{user_id}/role", response_model=UserRead)
def set_role(
    user_id: int,
    payload: RoleUpdate,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    try:
        return service.set_role(user_id, payload.role)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())
