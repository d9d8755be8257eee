"""Business logic service for Goals."""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.core.constants import ColumnScale, LedgerMessages
from broking_api.db.models.goal import Goal
from broking_api.db.session import transaction
from broking_api.repositories.goal_repository import GoalRepository
from broking_api.repositories.trade_log_repository import TradeLogRepository
from broking_api.schemas.common import is_stored_positive
from broking_api.schemas.goal import GoalRequest
from broking_api.services.metrics_service import tracked_mutation
from broking_api.services.result_objects import DeleteResult, ErrorCode, GoalResult

logger = logging.getLogger(__name__)


def validate_goal_request(request: GoalRequest) -> Optional[str]:
    """Return the first validation message for a goal body, or None if valid."""
    if not request.name or not request.target_amount:
        return LedgerMessages.FIELDS_REQUIRED
    if not is_stored_positive(request.target_amount, ColumnScale.AMOUNT):
        return LedgerMessages.TARGET_NOT_POSITIVE
    return None


class GoalService:
    """Service layer for Goals."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.goals = GoalRepository(db)
        self.trade_logs = TradeLogRepository(db)

    async def get_all_goals_async(self) -> List[Goal]:
        """Get every goal, most recently created first."""
        return await self.goals.get_all()

    async def get_goal_async(self, goal_id: int) -> GoalResult:
        """Get a single goal by ID."""
        goal = await self.goals.get_by_id(goal_id)
        if not goal:
            return GoalResult.fail(ErrorCode.NOT_FOUND, LedgerMessages.GOAL_NOT_FOUND)
        return GoalResult(success=True, message=f"Found goal {goal.name}", goal=goal)

    @tracked_mutation("goal", "create")
    async def create_goal_async(self, request: GoalRequest) -> GoalResult:
        """Create a new savings goal."""
        error = validate_goal_request(request)
        if error:
            logger.warning(f"Rejected goal create: {error}")
            return GoalResult.fail(ErrorCode.VALIDATION_ERROR, error)

        try:
            async with transaction(self.db):
                goal = await self.goals.create(
                    Goal(name=request.name, target_amount=request.target_amount)
                )
        except SQLAlchemyError as e:
            logger.error(f"Failed to create goal {request.name}: {e}", exc_info=True)
            return GoalResult.fail(ErrorCode.STORE_ERROR, str(e))

        logger.info(f"Created goal {goal.id} ({goal.name})")
        return GoalResult(success=True, message=f"Successfully added goal {goal.name}", goal=goal)

    @tracked_mutation("goal", "update")
    async def update_goal_async(self, goal_id: int, request: GoalRequest) -> GoalResult:
        """Replace the name and target amount of an existing goal."""
        error = validate_goal_request(request)
        if error:
            logger.warning(f"Rejected update of goal {goal_id}: {error}")
            return GoalResult.fail(ErrorCode.VALIDATION_ERROR, error)

        try:
            async with transaction(self.db):
                goal = await self.goals.get_by_id(goal_id)
                if not goal:
                    return GoalResult.fail(ErrorCode.NOT_FOUND, LedgerMessages.GOAL_NOT_FOUND)

                goal = await self.goals.update(goal, {
                    "name": request.name,
                    "target_amount": request.target_amount,
                })
        except SQLAlchemyError as e:
            logger.error(f"Failed to update goal {goal_id}: {e}", exc_info=True)
            return GoalResult.fail(ErrorCode.STORE_ERROR, str(e))

        logger.info(f"Updated goal {goal_id}")
        return GoalResult(success=True, message=f"Successfully updated goal {goal.name}", goal=goal)

    @tracked_mutation("goal", "delete")
    async def delete_goal_async(self, goal_id: int) -> DeleteResult:
        """
        Delete a goal.

        Goals referenced by any trade log entry can never be deleted; there
        is no cascade for goals.
        """
        try:
            async with transaction(self.db):
                if await self.trade_logs.count_by_goal(goal_id) > 0:
                    logger.warning(f"Refused to delete goal {goal_id}: it has trade history")
                    return DeleteResult.fail(ErrorCode.CONFLICT, LedgerMessages.GOAL_HAS_TRADES)

                if not await self.goals.delete_by_id(goal_id):
                    return DeleteResult.fail(ErrorCode.NOT_FOUND, LedgerMessages.GOAL_NOT_FOUND)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete goal {goal_id}: {e}", exc_info=True)
            return DeleteResult.fail(ErrorCode.STORE_ERROR, str(e))

        logger.info(f"Deleted goal {goal_id}")
        return DeleteResult(success=True, message=LedgerMessages.GOAL_DELETED, deleted_id=goal_id)
