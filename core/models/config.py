# =============================================================================
# core/models/config.py - Global Portal Configuration
# =============================================================================
# The portal configuration is a single JSON document (global_config row 1).
# Only the fields the API acts on are typed; everything else the admin UI
# stores (titles, logos, popups, fonts) passes through untouched.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .content import SortPolicy
from .schedule import LectureRule


class GlobalConfig(BaseModel):
    """
    Portal-wide settings edited from the admin panel.

    Example:
        {
            "wizardTitle": "Wizard OS",
            "muggleTitle": "Core OS",
            "telegramLink": "https://t.me/...",
            "sortOrder": "newest",
            "schedules": [{"id": "r1", "subject": "OS", "days": ["Monday"], ...}]
        }
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    schedules: list[LectureRule] = Field(
        default_factory=list,
        description="Recurring lecture rules"
    )

    sort_order: SortPolicy | None = Field(
        default=None,
        alias="sortOrder",
        description="Global sort preference; each sector applies its own sortOrder"
    )

    telegram_link: str | None = Field(default=None, alias="telegramLink")

    @field_validator("schedules", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("sort_order", mode="before")
    @classmethod
    def _parse_sort_order(cls, value: Any) -> SortPolicy | None:
        return None if value in (None, "") else SortPolicy.parse(value)

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
