from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.api.responses import error_response
from broking_api.db.session import get_db
from broking_api.schemas.common import ErrorResponse, MessageResponse
from broking_api.schemas.goal import GoalRequest, GoalResponse
from broking_api.services.goal_service import GoalService

router = APIRouter(prefix="/goals", tags=["Goals"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_goal_service(db: AsyncSession = Depends(get_db)) -> GoalService:
    """Dependency to get GoalService instance."""
    return GoalService(db)


@router.get("", response_model=List[GoalResponse])
async def list_goals(service: GoalService = Depends(get_goal_service)):
    """Get all goals, most recently created first."""
    goals = await service.get_all_goals_async()
    return [GoalResponse.model_validate(g) for g in goals]


@router.get("/{goal_id}", response_model=GoalResponse, responses=_ERROR_RESPONSES)
async def get_goal(goal_id: int, service: GoalService = Depends(get_goal_service)):
    """Get goal by ID."""
    result = await service.get_goal_async(goal_id)
    if not result.success:
        return error_response(result)
    return GoalResponse.model_validate(result.goal)


@router.post(
    "",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES
)
async def create_goal(request: GoalRequest, service: GoalService = Depends(get_goal_service)):
    """Add a new goal."""
    result = await service.create_goal_async(request)
    if not result.success:
        return error_response(result)
    return GoalResponse.model_validate(result.goal)


@router.put("/{goal_id}", response_model=GoalResponse, responses=_ERROR_RESPONSES)
async def update_goal(
    goal_id: int,
    request: GoalRequest,
    service: GoalService = Depends(get_goal_service)
):
    """Update a goal."""
    result = await service.update_goal_async(goal_id, request)
    if not result.success:
        return error_response(result)
    return GoalResponse.model_validate(result.goal)


@router.delete("/{goal_id}", response_model=MessageResponse, responses=_ERROR_RESPONSES)
async def delete_goal(goal_id: int, service: GoalService = Depends(get_goal_service)):
    """
    Delete a goal.

    Goals with trade history cannot be deleted.

    Responses:
        200: Goal deleted
        400: Goal has trade history
        404: Goal not found
    """
    result = await service.delete_goal_async(goal_id)
    if not result.success:
        return error_response(result)
    return MessageResponse(message=result.message)
