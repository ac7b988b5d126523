# =============================================================================
# core/models/schedule.py - Lecture Schedule Schemas
# =============================================================================
# These models define recurring lecture rules and the resolved views:
# - LectureRule: A weekly recurrence (days + time window + optional date range)
# - Batch: Student cohort a rule is addressed to
# - TodaySchedule / WeekSchedule: Resolver output returned by the API
#
# Rules live inside the global config (config.schedules), so they are edited
# together with the rest of the portal configuration.
# =============================================================================

from datetime import date as date_type
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Week starts on Monday for display purposes
WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


class Batch(str, Enum):
    """Student cohorts."""
    AICS = "AICS"
    CSDA = "CSDA"


class Recurrence(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class LectureRule(BaseModel):
    """
    A recurring scheduling entry.

    `days` is authoritative when non-empty; rules saved before multi-day
    support carry a single `dayOfWeek` instead. A rule without a batch
    applies to every batch.

    Example:
        {
            "id": "r1",
            "subject": "Operating Systems",
            "batch": "AICS",
            "days": ["Monday", "Wednesday"],
            "startTime": "10:00",
            "endTime": "11:30",
            "startDate": "2024-01-08",
            "endDate": "2024-05-31",
            "isActive": true
        }
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., min_length=1)

    subject: str = Field(default="")

    batch: Batch | None = Field(
        default=None,
        description="Target cohort; absent means every batch"
    )

    days: list[str] = Field(
        default_factory=list,
        description="Weekday names the rule recurs on"
    )

    day_of_week: str | None = Field(
        default=None,
        alias="dayOfWeek",
        description="Legacy single-day field"
    )

    # HH:mm, 24-hour, zero-padded
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")

    # YYYY-MM-DD; an absent bound is open on that side
    start_date: date_type | None = Field(default=None, alias="startDate")
    end_date: date_type | None = Field(default=None, alias="endDate")

    is_active: bool = Field(default=True, alias="isActive")

    recurrence: Recurrence = Field(default=Recurrence.WEEKLY)

    # Display-only payload
    link: str | None = Field(default=None)
    image: str | None = Field(default=None)
    custom_message: str | None = Field(default=None, alias="customMessage")

    @field_validator("batch", "start_date", "end_date", "start_time", "end_time", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # The admin form submits empty strings for cleared inputs
        return None if value == "" else value

    @field_validator("days", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def weekdays(self) -> list[str]:
        """Days the rule recurs on, falling back to the legacy field."""
        if self.days:
            return self.days
        if self.day_of_week:
            return [self.day_of_week]
        return []

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class TodaySchedule(BaseModel):
    """Lectures happening on a given date."""
    date: date_type
    weekday: str
    batch: Batch | None = None
    lectures: list[dict[str, Any]] = Field(default_factory=list)


class WeekSchedule(BaseModel):
    """Full timetable grouped by weekday, Monday first."""
    batch: Batch | None = None
    days: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
