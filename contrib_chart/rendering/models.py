from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator

from contrib_chart.rendering.levels import contribution_level


DEFAULT_THEME = "github"

RADIUS_RANGE = (0, 10)
GAP_RANGE = (0, 5)
SIZE_RANGE = (1, 20)
MARGIN_RANGE = (0, 100)

DAYS_PER_WEEK = 7


class ThemeMode(StrEnum):
    LIGHT = "light"
    DARK = "dark"


class OutputFormat(StrEnum):
    SVG = "svg"
    PNG = "png"

    @property
    def media_type(self) -> str:
        return "image/png" if self is OutputFormat.PNG else "image/svg+xml"


class ActivityRecord(BaseModel):
    """Contribution count for a single calendar day.

    `level` is derived from `count` when it is not supplied explicitly.
    """

    model_config = ConfigDict(frozen=True)

    date: date
    count: int = Field(ge=0)
    level: int = Field(ge=0, le=4)

    @model_validator(mode="before")
    @classmethod
    def derive_level(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("level") is not None:
            return data
        count = data.get("count")
        # Non-integer counts are left for field validation to reject.
        if isinstance(count, int) and not isinstance(count, bool):
            return {**data, "level": contribution_level(count)}
        return data


class ContributionData(BaseModel):
    """Sorted, per-date contribution records plus their total."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    days: list[ActivityRecord]


class RenderConfig(BaseModel):
    """Resolved chart options.

    Numeric fields are expected to be clamped by the caller; the field
    constraints only reject values outside the supported ranges.
    """

    model_config = ConfigDict(frozen=True)

    username: str = ""
    theme: str = DEFAULT_THEME
    mode: ThemeMode = ThemeMode.LIGHT
    color: str | None = None
    bg: bool = True
    radius: int = Field(default=2, ge=RADIUS_RANGE[0], le=RADIUS_RANGE[1])
    gap: int = Field(default=2, ge=GAP_RANGE[0], le=GAP_RANGE[1])
    size: int = Field(default=10, ge=SIZE_RANGE[0], le=SIZE_RANGE[1])
    margin: int = Field(default=20, ge=MARGIN_RANGE[0], le=MARGIN_RANGE[1])
    grid_only: bool = False
    show_months: bool = False
    show_days: bool = False
    show_scale: bool = True
    show_username: bool = True

    # Grid-only mode hides every decoration regardless of the individual flags.
    @property
    def months_visible(self) -> bool:
        return self.show_months and not self.grid_only

    @property
    def days_visible(self) -> bool:
        return self.show_days and not self.grid_only

    @property
    def legend_visible(self) -> bool:
        return self.show_scale and not self.grid_only

    @property
    def username_visible(self) -> bool:
        return self.show_username and not self.grid_only


@dataclass(frozen=True)
class DenseCalendar:
    """Gap-free run of days from a Sunday through a Saturday."""

    days: tuple[ActivityRecord, ...]

    def __post_init__(self) -> None:
        if not self.days or len(self.days) % DAYS_PER_WEEK:
            raise ValueError("calendar must contain whole weeks")

    @property
    def weeks(self) -> tuple[tuple[ActivityRecord, ...], ...]:
        return tuple(
            self.days[index : index + DAYS_PER_WEEK]
            for index in range(0, len(self.days), DAYS_PER_WEEK)
        )

    @property
    def week_count(self) -> int:
        return len(self.days) // DAYS_PER_WEEK

    @property
    def start(self) -> date:
        return self.days[0].date

    @property
    def end(self) -> date:
        return self.days[-1].date

    @property
    def total(self) -> int:
        return sum(day.count for day in self.days)


@dataclass(frozen=True)
class RenderedChart:
    content: str | bytes
    media_type: str
