import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import jwt, JWTError
from fastapi import HTTPException, status

from app.core.config import settings
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import AuthResponse, UserLogin, UserRegister

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self):
        self.SECRET_KEY = settings.SECRET_KEY
        self.REFRESH_SECRET_KEY = settings.SECRET_KEY + "_refresh"
        self.ALGORITHM = settings.ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS

    def hash_password(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        return hashed.decode('utf-8')

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError:
            return False

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def create_refresh_token(self, data: dict) -> str:
        to_encode = data.copy()
        expire = datetime.utcnow() + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS)
        to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
        return jwt.encode(to_encode, self.REFRESH_SECRET_KEY, algorithm=self.ALGORITHM)

    def decode_access_token(self, token: str) -> Optional[int]:
        """User id from a valid access token, None otherwise."""
        try:
            payload = jwt.decode(token, self.SECRET_KEY, algorithms=[self.ALGORITHM])
            user_id = payload.get("sub")
            return int(user_id) if user_id is not None else None
        except (JWTError, ValueError):
            return None

    def _decode_refresh_token(self, token: str) -> Optional[int]:
        try:
            payload = jwt.decode(token, self.REFRESH_SECRET_KEY, algorithms=[self.ALGORITHM])
            user_id = payload.get("sub")
            return int(user_id) if user_id is not None else None
        except (JWTError, ValueError):
            return None

    async def issue_tokens(self, repo: UserRepository, user: User) -> AuthResponse:
        access_token = self.create_access_token(data={"sub": str(user.id)})
        refresh_token = self.create_refresh_token(data={"sub": str(user.id)})
        await repo.save_refresh_token(
            user,
            refresh_token,
            datetime.utcnow() + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS),
        )
        return AuthResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer"
        )

    async def authenticate_user(self, repo: UserRepository, login_data: UserLogin) -> Optional[User]:
        user = await repo.get_by_email(login_data.email)
        if not user or not self.verify_password(login_data.password, user.password):
            return None
        return user

    async def register_user(self, repo: UserRepository, user_data: UserRegister) -> User:
        if await repo.get_by_email(user_data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this email already exists"
            )

        new_user = User(
            email=user_data.email,
            password=self.hash_password(user_data.password),
            created_at=datetime.utcnow()
        )
        return await repo.create_user(new_user)

    async def rotate_refresh_token(self, repo: UserRepository, refresh_token: str) -> Optional[User]:
        """Validate a refresh token and return its owner.

        A correctly signed token that is no longer stored means it was
        already used: every token of that user is revoked.
        """
        user_id = self._decode_refresh_token(refresh_token)
        if user_id is None:
            return None

        user = await repo.get_by_refresh_token(refresh_token)
        if user is None:
            victim = await repo.get_by_id(user_id)
            if victim is not None:
                logger.warning(f"Refresh token reuse detected for user {user_id}")
                await repo.revoke_refresh_token(victim)
            return None

        if user.refresh_token_expires is None or user.refresh_token_expires < datetime.utcnow():
            return None
        return user

    async def logout_user(self, repo: UserRepository, user: User) -> None:
        await repo.revoke_refresh_token(user)


auth_service = AuthService()
