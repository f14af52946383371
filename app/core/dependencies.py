from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.user import User
from app.repositories.entry_repository import EntryRepository
from app.repositories.summary_repository import SummaryRepository
from app.repositories.user_exercise_repository import UserExerciseRepository
from app.repositories.user_repository import UserRepository
from app.services.ai_service import AIService, ai_service
from app.services.auth_service import auth_service
from app.services.identity_service import IdentityService, identity_service


# auto_error=False: a missing token is 401, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_entry_repository(db: AsyncSession = Depends(get_db)) -> EntryRepository:
    return EntryRepository(db)


def get_summary_repository(db: AsyncSession = Depends(get_db)) -> SummaryRepository:
    return SummaryRepository(db)


def get_user_exercise_repository(db: AsyncSession = Depends(get_db)) -> UserExerciseRepository:
    return UserExerciseRepository(db)


def get_ai_service() -> AIService:
    return ai_service


def get_identity_service() -> IdentityService:
    return identity_service


def unauthorized(detail: str = "Invalid access token") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_bearer_token(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    if credentials is None or not credentials.credentials.strip():
        raise unauthorized("Not authenticated")
    return credentials.credentials.strip()


async def get_current_user(
        token: str = Depends(get_bearer_token),
        repo: UserRepository = Depends(get_user_repository),
) -> User:
    """Resolve the caller once per request; handlers pass user.id on explicitly."""
    user_id = auth_service.decode_access_token(token)
    if user_id is None:
        raise unauthorized()

    user = await repo.get_by_id(user_id)
    if user is None:
        raise unauthorized()

    return user
