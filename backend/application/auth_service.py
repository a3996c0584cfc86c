"""Terminal sign-in against the configured credential table."""
from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from domain.user import User, UserRole

if TYPE_CHECKING:
    from app.config import AppConfig
    from infrastructure.repository import PosRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, config: "AppConfig", repository: "PosRepository"):
        self.config = config
        self.repo = repository

    def update_config(self, config: "AppConfig") -> None:
        self.config = config

    def _accounts(self) -> List[Dict[str, Any]]:
        return list((self.config.auth or {}).get("users", []))

    def login(self, username: str, password: str) -> Optional[User]:
        for account in self._accounts():
            if account.get("username") != username:
                continue
            if not secrets.compare_digest(str(account.get("password", "")), password):
                break
            user = User(
                user_id=str(account.get("user_id", username)),
                username=username,
                role=UserRole(account.get("role", "staff")),
                name=str(account.get("name", username)),
            )
            self.repo.set_current_user(user)
            logger.info("User %s signed in", username)
            return user
        logger.info("Rejected sign-in for %s", username)
        return None

    def logout(self) -> None:
        self.repo.clear_current_user()

    def current_user(self) -> Optional[User]:
        return self.repo.get_current_user()
