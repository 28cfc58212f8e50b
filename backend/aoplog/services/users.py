from __future__ import annotations

from datetime import datetime, timezone
from itertools import count
from threading import Lock

from aoplog.aop import service_log
from aoplog.schemas import UserCreate, UserOut


class UserService:
    """Repositório em memória usado pela camada de controller."""

    def __init__(self) -> None:
        self._users: dict[int, UserOut] = {}
        self._ids = count(1)
        self._lock = Lock()

    @service_log(description="fetch user")
    def get_user(self, user_id: int) -> UserOut | None:
        return self._users.get(user_id)

    @service_log(description="create user")
    def create_user(self, payload: UserCreate) -> UserOut:
        with self._lock:
            user = UserOut(
                id=next(self._ids),
                name=payload.name,
                email=payload.email,
                created_at=datetime.now(timezone.utc),
            )
            self._users[user.id] = user
        return user

    @service_log(description="list users", asynchronous=True)
    def list_users(self) -> list[UserOut]:
        return sorted(self._users.values(), key=lambda user: user.id)

    @service_log(description="recalculate user score")
    def recalculate_score(self, user_id: int) -> int:
        raise RuntimeError("Score backend unavailable")
