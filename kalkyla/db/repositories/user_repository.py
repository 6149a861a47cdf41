"""
User repository - encapsulates all user data access.
"""

from sqlalchemy import select

from kalkyla.db.models.user import User
from kalkyla.db.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup; emails are stored lower-cased."""
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def list_users(self, org_id: int | None = None) -> list[User]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        if org_id is not None:
            stmt = stmt.where(User.org_id == org_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
