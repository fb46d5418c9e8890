"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum
from typing import Self

from django.utils import timezone

DATE_LAYOUT = "%Y-%m-%d"
DEFAULT_CAPACITY = 12


@dataclass(frozen=True, order=True)
class EventId:
    """Date-only key of one occurrence, derived from its start instant."""

    value: date

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=datetime.strptime(value, DATE_LAYOUT).date())

    @classmethod
    def from_start(cls, starts_at: datetime) -> Self:
        """Key of an occurrence starting at this instant, in the local time zone."""
        return cls(value=timezone.localdate(starts_at))

    def __str__(self) -> str:
        return self.value.strftime(DATE_LAYOUT)


class Level(IntEnum):
    """Ordinal skill tier gating participation."""

    BASIC = 0
    MEDIUM = 1
    ADVANCED = 2

    @classmethod
    def parse(cls, value: "str | Level | None") -> "Level":
        """Return the tier named by *value*, falling back to BASIC."""
        if isinstance(value, Level):
            return value
        if not isinstance(value, str):
            return cls.BASIC
        name = value.strip().upper()
        if name == "BEGINNER":
            return cls.BASIC
        try:
            return cls[name]
        except KeyError:
            return cls.BASIC


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class Price:
    """Price in whole currency units; zero means free."""

    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Price cannot be negative")

    @property
    def is_free(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return str(self.amount)
