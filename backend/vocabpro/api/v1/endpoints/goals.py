"""
Goals API Endpoints
REST API for daily goals, the day streak and streak shields.
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from vocabpro.core.dependencies import get_goals_manager, get_shields_manager
from vocabpro.managers.daily_goals_manager import DailyGoalsManager, DayProgress, TodayProgress
from vocabpro.managers.streak_protection_manager import StreakCheck, StreakProtectionManager
from vocabpro.models.goals import GOAL_PRESETS, GoalSpec, StreakShields
from vocabpro.schemas.progress import (
    AddShieldsRequest,
    CustomGoalRequest,
    GoalPresetRequest,
    ProtectStreakRequest,
)


logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== DAILY GOAL ENDPOINTS ====================

@router.get("/today", response_model=TodayProgress)
async def get_today(goals: DailyGoalsManager = Depends(get_goals_manager)):
    """Today's progress against the goal, plus the day streak."""
    return goals.get_today_progress()


@router.get("/week", response_model=list[DayProgress])
async def get_week(goals: DailyGoalsManager = Depends(get_goals_manager)):
    """Last seven days, oldest first."""
    return goals.get_week_history()


@router.get("/presets")
async def get_presets():
    return {name: goal.model_dump() for name, goal in GOAL_PRESETS.items()}


@router.put("/preset", response_model=GoalSpec)
async def set_goal_preset(
    request: GoalPresetRequest,
    goals: DailyGoalsManager = Depends(get_goals_manager)
):
    try:
        return goals.set_goal_preset(request.preset)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/custom", response_model=GoalSpec)
async def set_custom_goal(
    request: CustomGoalRequest,
    goals: DailyGoalsManager = Depends(get_goals_manager)
):
    return goals.set_custom_goal(request.questions, request.points)


@router.post("/cleanup")
async def cleanup_history(goals: DailyGoalsManager = Depends(get_goals_manager)):
    """Drop daily records past the retention window."""
    return {"removed": goals.cleanup_history()}


# ==================== SHIELD ENDPOINTS ====================

@router.get("/shields", response_model=StreakShields)
async def get_shields(shields: StreakProtectionManager = Depends(get_shields_manager)):
    """Shield state, after any weekly award."""
    shields.get_shields()
    return shields.get_state()


@router.post("/shields", response_model=StreakShields)
async def add_shields(
    request: AddShieldsRequest,
    shields: StreakProtectionManager = Depends(get_shields_manager)
):
    shields.add_shields(request.amount)
    return shields.get_state()


@router.get("/shields/check", response_model=StreakCheck)
async def check_streak(shields: StreakProtectionManager = Depends(get_shields_manager)):
    """Whether the streak is intact and whether a shield could bridge it."""
    return shields.check_streak(shields.last_active_day())


@router.post("/shields/protect", response_model=StreakCheck)
async def protect_streak(
    request: ProtectStreakRequest,
    shields: StreakProtectionManager = Depends(get_shields_manager)
):
    """Spend a shield on a single missed day."""
    try:
        last_active = request.last_active_day or shields.last_active_day()
        return shields.protect_gap(last_active)
    except Exception as e:
        logger.error(f"Error protecting streak: {e}")
        raise HTTPException(status_code=500, detail=f"Error protecting streak: {str(e)}")
