# app/api/deps.py
from fastapi import Depends, Header, HTTPException
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import Principal
from app.repos.user_repo import UserRepo
from app.services.rate_limit_service import RateLimitService
from app.utils.settings import RATE_LIMIT_ENABLED, RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


def get_current_user(
    x_user_id: int | None = Header(None),
    db: Session = Depends(get_db),
) -> Principal:
    #token weryfikuje bramka, tu dostajemy juz id uzytkownika
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Brak naglowka X-User-Id")

    user = UserRepo(db).get_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Nieznany uzytkownik")

    return Principal(id=user.id, role=user.role)


def require_admin(user: Principal = Depends(get_current_user)) -> Principal:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Wymagane uprawnienia administratora")
    return user


def ensure_self_or_admin(user: Principal, user_id: int) -> None:
    if user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Brak dostępu do danych innego użytkownika")


def get_rate_limiter() -> RateLimitService | None:
    if not RATE_LIMIT_ENABLED:
        return None
    return RateLimitService()


def checkout_rate_limit(
    user: Principal = Depends(get_current_user),
    limiter: RateLimitService | None = Depends(get_rate_limiter),
) -> None:
    if limiter is None:
        return

    try:
        allowed = limiter.hit(f"checkout:{user.id}", RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS)
    except RedisError as e:
        #redis niedostepny - nie blokujemy zamowien
        logger.warning(f"Rate limiter niedostepny: {e}")
        return

    if not allowed:
        raise HTTPException(status_code=429, detail="Zbyt wiele zamówień, spróbuj później")
