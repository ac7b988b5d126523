# =============================================================================
# app/routers/schedule.py - Lecture Schedule Endpoints
# =============================================================================

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query

from app.config import settings
from core.models.schedule import Batch, TodaySchedule, WeekSchedule
from core.services.config_service import ConfigService
from lib.schedule import resolve_today, resolve_week, weekday_name

router = APIRouter()


@router.get("/today", response_model=TodaySchedule)
async def get_today(
    batch: Annotated[Batch | None, Query(description="AICS or CSDA; omit for all")] = None,
):
    """Lectures scheduled for today, earliest first."""
    today = date.today()
    lectures = resolve_today(
        ConfigService.get_lecture_rules(),
        batch,
        today,
        enforce_date_range=settings.ENFORCE_LECTURE_DATE_RANGE,
    )
    return TodaySchedule(
        date=today,
        weekday=weekday_name(today),
        batch=batch,
        lectures=[rule.to_row() for rule in lectures],
    )


@router.get("/week", response_model=WeekSchedule)
async def get_week(
    batch: Annotated[Batch | None, Query(description="AICS or CSDA; omit for all")] = None,
):
    """
    Weekly timetable.

    Always contains all seven days, Monday first; empty days are [].
    """
    week = resolve_week(ConfigService.get_lecture_rules(), batch)
    return WeekSchedule(
        batch=batch,
        days={day: [rule.to_row() for rule in rules] for day, rules in week.items()},
    )
