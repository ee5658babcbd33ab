"""Minimum spacing between successive page requests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, computed_field

if TYPE_CHECKING:
    from streamadmin.foundation.config import ThrottleSettings


class ThrottlePolicy(BaseModel):
    """Fixed minimum gap between the starts of two page fetches.

    Bounds the rate at which fetches are issued, not the rate at which they
    complete: the gap is measured from when the previous fetch attempt began.

    Example:
        >>> ThrottlePolicy(min_interval=0.2).remaining(last_start=10.0, now=10.05)
        0.15
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_interval: NonNegativeFloat = Field(default=0.2, description="Seconds between fetch starts")

    @computed_field
    @property
    def is_disabled(self) -> bool:
        return self.min_interval == 0

    def remaining(self, last_start: float | None, now: float) -> float:
        """Seconds still to wait before the next fetch may start."""
        if last_start is None or self.is_disabled:
            return 0.0
        return max(0.0, round(self.min_interval - (now - last_start), 9))

    @classmethod
    def streams(cls, settings: ThrottleSettings) -> ThrottlePolicy:
        return cls(min_interval=settings.stream_interval)

    @classmethod
    def tags(cls, settings: ThrottleSettings) -> ThrottlePolicy:
        return cls(min_interval=settings.tag_interval)

    @classmethod
    def consumers(cls, settings: ThrottleSettings) -> ThrottlePolicy:
        return cls(min_interval=settings.consumer_interval)


NO_THROTTLE = ThrottlePolicy(min_interval=0.0)
