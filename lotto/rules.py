"""Game constants for the number selection."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigError


@dataclass(frozen=True)
class GameRules:
    """Bounds a ticket selection (and a draw) must respect.

    Attributes
    ----------
    min_picks : int
        Fewest distinct numbers a ticket may carry.
    max_picks : int
        Most distinct numbers a ticket may carry.
    lowest : int
        Smallest selectable number (inclusive).
    highest : int
        Largest selectable number (inclusive).
    """

    min_picks: int = 6
    max_picks: int = 10
    lowest: int = 1
    highest: int = 45

    def __post_init__(self) -> None:
        if self.lowest > self.highest:
            raise ConfigError("lowest number must not exceed highest number")
        if self.min_picks < 1:
            raise ConfigError("min_picks must be at least 1")
        if self.min_picks > self.max_picks:
            raise ConfigError("min_picks must not exceed max_picks")
        if self.max_picks > self.highest - self.lowest + 1:
            raise ConfigError("max_picks cannot exceed the size of the number range")

    def in_range(self, value: int) -> bool:
        return self.lowest <= value <= self.highest

    def allows_count(self, count: int) -> bool:
        return self.min_picks <= count <= self.max_picks


DEFAULT_RULES = GameRules()


__all__ = ["GameRules", "DEFAULT_RULES"]
