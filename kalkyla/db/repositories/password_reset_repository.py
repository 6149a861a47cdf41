from sqlalchemy import delete, select

from kalkyla.db.models.password_reset import PasswordResetToken
from kalkyla.db.repositories.base_repository import BaseRepository


class PasswordResetRepository(BaseRepository[PasswordResetToken]):
    def __init__(self, session):
        super().__init__(session, PasswordResetToken)

    async def get_by_token(self, token: str) -> PasswordResetToken | None:
        result = await self.session.execute(
            select(PasswordResetToken).where(PasswordResetToken.token == token)
        )
        return result.scalar_one_or_none()

    async def delete_for_user(self, user_id: int) -> None:
        await self.session.execute(delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id))
