from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from enps_survey.auth.models import TelegramUser
from enps_survey.db.models import User, utcnow
from enps_survey.db.upsert import dialect_insert


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, user: TelegramUser) -> None:
        now = utcnow()
        profile = {
            "first_name": user.first_name,
            "last_name": user.last_name,
            "username": user.username,
            "language_code": user.language_code,
            "photo_url": user.photo_url,
        }
        stmt = dialect_insert(self._session, User).values(
            id=user.id, created_at=now, updated_at=now, **profile
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.id],
            set_={**profile, "updated_at": now},
        )
        await self._session.execute(stmt)

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)
