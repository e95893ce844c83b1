from typing import Optional
import logging
import uuid

from app.core.errors import Unauthenticated
from app.repositories.user_repository import SessionRepository

logger = logging.getLogger(__name__)


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Извлекает токен из заголовка 'Authorization: Bearer <token>'"""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class SessionProvider:
    """Проверяет сессию и отдаёт id аутентифицированного пользователя"""

    def __init__(self, repo: Optional[SessionRepository] = None):
        self.repo = repo or SessionRepository()

    async def require_user(self, token: Optional[str]) -> uuid.UUID:
        if not token:
            raise Unauthenticated("Missing session token")
        session = await self.repo.get_active(token)
        if session is None:
            logger.info("Отклонён запрос с неактивной сессией")
            raise Unauthenticated("Invalid or expired session")
        return session.user_id
