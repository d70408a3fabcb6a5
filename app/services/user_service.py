from sqlalchemy.orm import Session
from app.data.models.user import UserModel
from app.domain.errors import NotFoundError
from app.repos.user_repo import UserRepo
from app.domain.schemas import UserCreate, UserRead
from app.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        #ten sam email = ten sam uzytkownik
        existing = self.repo.get_user_by_email(payload.email)
        if existing:
            return UserRead.model_validate(existing)

        #rola nigdy z requestu, admina nadaje inny admin albo seed
        user = UserModel(name=payload.name, email=payload.email, role="customer")
        created = self.repo.create_user(user)

        logger.info(f"Utworzono uzytkownika {created.id}")
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        return UserRead.model_validate(self._get_or_404(user_id))

    def set_role(self, user_id: int, role: str) -> UserRead:
        user = self._get_or_404(user_id)
        user.role = role
        self.repo.commit()

        logger.info(f"Rola uzytkownika {user_id} -> {role}")
        return UserRead.model_validate(user)

    def _get_or_404(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
