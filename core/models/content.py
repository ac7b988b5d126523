# =============================================================================
# core/models/content.py - Content Item & Sector Schemas
# =============================================================================
# These models define the API contract for published content:
# - ContentItem: A post (announcement, file, video, ...) inside a sector
# - Sector: A named collection of items with a shared sort policy
# - SortPolicy: How a sector orders its items
# - OrderUpdate / ReorderRequest: Payloads for persisting a manual order
#
# Column names in the `items` table are camelCase (isPinned, fileUrl) except
# order_index, so every model accepts both the stored name and the Python name.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemType(str, Enum):
    """Kinds of content a post can carry."""
    ANNOUNCEMENT = "announcement"
    FILE = "file"
    VIDEO = "video"
    TASK = "task"
    MIXED = "mixed"
    LINK = "link"
    CODE = "code"


class SortPolicy(str, Enum):
    """
    Ordering applied to a sector's items.

    - newest: most recent date first
    - oldest: earliest date first
    - alphabetical: natural title order ("Item 2" before "Item 10")
    - manual: admin-defined order_index
    """
    NEWEST = "newest"
    OLDEST = "oldest"
    ALPHABETICAL = "alphabetical"
    MANUAL = "manual"

    @classmethod
    def parse(cls, value: "SortPolicy | str | None") -> "SortPolicy":
        """Resolve a stored value, defaulting to newest when unset or unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NEWEST


class ContentItem(BaseModel):
    """
    A unit of published content.

    Unknown columns (style, images, ...) are kept so a read-modify-write
    never drops data the API doesn't model.

    Example:
        {
            "id": "8f0c...",
            "title": "Lecture 2 slides",
            "content": "Uploaded after class.",
            "date": "2024.03.11",
            "type": "file",
            "sector": "resources",
            "subject": "Algorithms",
            "isPinned": false,
            "order_index": 3
        }
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., min_length=1, description="Opaque unique identifier")

    title: str = Field(default="", description="Post title (sanitized)")

    content: str = Field(default="", description="Post body (sanitized)")

    # Dot-separated (YYYY.MM.DD); dashes are tolerated on read
    date: str = Field(default="", description="Publication date, YYYY.MM.DD")

    type: ItemType = Field(default=ItemType.ANNOUNCEMENT, description="Content kind")

    sector: str | None = Field(default=None, description="Owning sector id")

    subject: str = Field(default="General", description="Subject tag")

    is_pinned: bool = Field(
        default=False,
        alias="isPinned",
        description="Pinned items always sort first"
    )

    order_index: int = Field(
        default=0,
        description="Position used when the sector policy is manual"
    )

    author: str | None = Field(default=None, description="Display name of the poster")

    file_url: str | None = Field(default=None, alias="fileUrl", description="Attached file URL")

    image: str | None = Field(default=None, description="Cover image URL")

    @field_validator("title", "content", "date", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("subject", mode="before")
    @classmethod
    def _default_subject(cls, value: Any) -> Any:
        return value or "General"

    @field_validator("order_index", mode="before")
    @classmethod
    def _default_order_index(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("is_pinned", mode="before")
    @classmethod
    def _default_pinned(cls, value: Any) -> Any:
        return bool(value)

    def to_row(self) -> dict[str, Any]:
        """Serialize using the stored column names."""
        return self.model_dump(by_alias=True, mode="json")


class Sector(BaseModel):
    """A named collection of items; the sort policy applies to every viewer."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., min_length=1, description="Stable key used to filter items")
    wizard_name: str = Field(default="", alias="wizardName")
    muggle_name: str = Field(default="", alias="muggleName")
    wizard_icon: str = Field(default="", alias="wizardIcon")
    muggle_icon: str = Field(default="", alias="muggleIcon")
    description: str = Field(default="")

    sort_order: SortPolicy = Field(
        default=SortPolicy.NEWEST,
        alias="sortOrder",
        description="Comparator applied to this sector's items"
    )

    @field_validator("sort_order", mode="before")
    @classmethod
    def _parse_sort_order(cls, value: Any) -> SortPolicy:
        return SortPolicy.parse(value)

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class OrderUpdate(BaseModel):
    """One row of a reorder commit."""
    id: str = Field(..., min_length=1)
    order_index: int = Field(..., ge=0)


class ReorderRequest(BaseModel):
    """Batch of positions sent by the admin UI after a drag-and-drop session."""
    updates: list[OrderUpdate] = Field(default_factory=list)


class SectorReorderRequest(BaseModel):
    """Single drag-and-drop move resolved and committed server-side."""

    model_config = ConfigDict(populate_by_name=True)

    moved_id: str = Field(..., alias="movedId", min_length=1)
    target_id: str = Field(..., alias="targetId", min_length=1)


# Sectors served when none have been saved yet
DEFAULT_SECTORS: list[dict[str, Any]] = [
    {
        "id": "announcements",
        "wizardName": "Daily Prophet",
        "muggleName": "Announcements",
        "wizardIcon": "Scroll",
        "muggleIcon": "Megaphone",
        "description": "Main news feed and critical updates.",
        "sortOrder": "newest",
    },
    {
        "id": "lectures",
        "wizardName": "Owl Post Schedule",
        "muggleName": "Lecture Announcements",
        "wizardIcon": "Feather",
        "muggleIcon": "BellRing",
        "description": "Incoming knowledge streams and recordings.",
        "sortOrder": "newest",
    },
    {
        "id": "books",
        "wizardName": "Restricted Section",
        "muggleName": "Books",
        "wizardIcon": "Lock",
        "muggleIcon": "Book",
        "description": "High-level knowledge materials.",
        "sortOrder": "alphabetical",
    },
    {
        "id": "notes",
        "wizardName": "Pensieve Memories",
        "muggleName": "Pre-Notes",
        "wizardIcon": "Waves",
        "muggleIcon": "FileText",
        "description": "Archived thoughts and preliminary data.",
        "sortOrder": "newest",
    },
    {
        "id": "resources",
        "wizardName": "Room of Requirement",
        "muggleName": "Academic Resources",
        "wizardIcon": "DoorOpen",
        "muggleIcon": "Library",
        "description": "Tools appearing exactly when you need them.",
        "sortOrder": "newest",
    },
    {
        "id": "tasks",
        "wizardName": "O.W.L. Tasks",
        "muggleName": "Tutorial Sheets",
        "wizardIcon": "ScrollText",
        "muggleIcon": "ClipboardList",
        "description": "Assessments and practical evaluations.",
        "sortOrder": "newest",
    },
    {
        "id": "system_info",
        "wizardName": "Ministry Archives",
        "muggleName": "System Protocols",
        "wizardIcon": "CircleHelp",
        "muggleIcon": "Settings2",
        "description": "Operational status and documentation.",
        "sortOrder": "newest",
    },
]
