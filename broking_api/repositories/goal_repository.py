"""Repository for Goals data access."""
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.db.models.goal import Goal
from broking_api.repositories.base import BaseRepository


class GoalRepository(BaseRepository[Goal]):
    """Repository for Goals."""

    def __init__(self, db: AsyncSession):
        super().__init__(Goal, db)
