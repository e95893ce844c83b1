from app.models.user import User, UserSession
from typing import Optional
from datetime import datetime, timezone
import secrets
import uuid

class UserRepository:
    async def create(self, email: str, display_name: Optional[str] = None) -> User:
        return await User.create(email=email, display_name=display_name)


class SessionRepository:
    async def get_active(self, token: str) -> Optional[UserSession]:
        """Возвращает неотозванную и неистёкшую сессию по токену"""
        session = await UserSession.filter(token=token, revoked=False).first()
        if session is None:
            return None
        expires_at = session.expires_at
        if expires_at is not None:
            # Без USE_TZ драйвер может вернуть naive datetime, храним всегда UTC
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            if expires_at <= datetime.now(timezone.utc):
                return None
        return session

    async def create(self, user_id: uuid.UUID, expires_at: Optional[datetime] = None, token: Optional[str] = None) -> UserSession:
        """Выпуск сессий - забота внешнего провайдера; метод нужен для сидинга и тестов"""
        return await UserSession.create(
            user_id=user_id,
            token=token or secrets.token_urlsafe(32),
            expires_at=expires_at,
        )

    async def revoke(self, token: str) -> int:
        return await UserSession.filter(token=token).update(revoked=True)
