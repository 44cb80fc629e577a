"""Validation and normalization of raw ticket submissions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .errors import Reason, ValidationError
from .rules import DEFAULT_RULES, GameRules

NATIONAL_ID_MAX_LENGTH = 20

RawToken = Union[int, str]
RawSelection = Union[str, Sequence[RawToken], None]

_INT_TOKEN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class TicketSelection:
    """Canonical, validated ticket input.

    Attributes
    ----------
    national_id : str
        Identifier exactly as submitted.
    numbers : frozenset[int]
        Distinct selected numbers; ordering of the raw input is not kept.
    """

    national_id: str
    numbers: frozenset[int]

    def sorted_numbers(self) -> list[int]:
        return sorted(self.numbers)


def _tokens(raw: RawSelection) -> list[RawToken]:
    if raw is None:
        return []
    if isinstance(raw, str):
        if not raw.strip():
            return []
        return raw.split(",")
    if isinstance(raw, (list, tuple, set, frozenset)):
        return list(raw)
    raise ValidationError(Reason.MALFORMED_TOKEN, f"Unsupported number selection: {raw!r}")


def _parse_token(token: object) -> int:
    # bool is an int subclass; True/False are never a number pick.
    if isinstance(token, bool):
        raise ValidationError(Reason.MALFORMED_TOKEN, f"Not an integer: {token!r}")
    if isinstance(token, int):
        return token
    if isinstance(token, str):
        stripped = token.strip()
        if _INT_TOKEN.fullmatch(stripped):
            return int(stripped)
    raise ValidationError(Reason.MALFORMED_TOKEN, f"Not an integer: {token!r}")


class TicketIntakeValidator:
    """Turns a raw submission into a :class:`TicketSelection` or a typed rejection.

    Checks run in a fixed order and the first violated rule decides the
    reason code: identity, presence, token syntax, duplicates, range,
    cardinality. Duplicates are rejected, never collapsed.
    """

    def __init__(self, rules: GameRules = DEFAULT_RULES) -> None:
        self.rules = rules

    def check_identity(self, national_id: Optional[str]) -> str:
        if not isinstance(national_id, str):
            raise ValidationError(
                Reason.MISSING_OR_INVALID_IDENTITY, "nationalId is required"
            )
        # Length is checked on the value as sent, and that value is what gets stored.
        if not national_id.strip() or len(national_id) > NATIONAL_ID_MAX_LENGTH:
            raise ValidationError(
                Reason.MISSING_OR_INVALID_IDENTITY,
                f"nationalId must be 1-{NATIONAL_ID_MAX_LENGTH} characters",
            )
        return national_id

    def parse_numbers(self, numbers: RawSelection) -> list[int]:
        """Parse every token, keeping order and duplicates for later checks."""

        tokens = _tokens(numbers)
        if not tokens:
            raise ValidationError(Reason.NUMBERS_REQUIRED, "numbers required")
        return [_parse_token(token) for token in tokens]

    def validate(self, national_id: Optional[str], numbers: RawSelection) -> TicketSelection:
        identity = self.check_identity(national_id)
        parsed = self.parse_numbers(numbers)

        distinct = frozenset(parsed)
        if len(distinct) != len(parsed):
            raise ValidationError(
                Reason.DUPLICATE_IN_INPUT,
                f"{len(parsed)} numbers given but only {len(distinct)} are distinct",
            )

        outside = sorted(n for n in distinct if not self.rules.in_range(n))
        if outside:
            raise ValidationError(
                Reason.OUT_OF_RANGE,
                f"numbers must be within {self.rules.lowest}-{self.rules.highest}: {outside}",
            )

        if not self.rules.allows_count(len(distinct)):
            raise ValidationError(
                Reason.INVALID_CARDINALITY,
                f"pick {self.rules.min_picks}-{self.rules.max_picks} numbers, got {len(distinct)}",
            )

        return TicketSelection(national_id=identity, numbers=distinct)

    def validate_draw(self, numbers: RawSelection) -> list[int]:
        """Validate externally supplied winning numbers, preserving their order.

        Every failure maps to ``invalid-draw-numbers``; the draw is an admin
        input, not a player submission, so it gets a single reason code.
        """

        try:
            parsed = self.parse_numbers(numbers)
        except ValidationError as exc:
            raise ValidationError(Reason.INVALID_DRAW_NUMBERS, exc.message) from exc

        if len(set(parsed)) != len(parsed):
            raise ValidationError(
                Reason.INVALID_DRAW_NUMBERS, "drawn numbers must be distinct"
            )
        outside = [n for n in parsed if not self.rules.in_range(n)]
        if outside:
            raise ValidationError(
                Reason.INVALID_DRAW_NUMBERS,
                f"drawn numbers must be within {self.rules.lowest}-{self.rules.highest}: {outside}",
            )
        return parsed


def validate_selection(
    national_id: Optional[str],
    numbers: RawSelection,
    rules: GameRules = DEFAULT_RULES,
) -> TicketSelection:
    """Shortcut for ``TicketIntakeValidator(rules).validate(...)``."""

    return TicketIntakeValidator(rules).validate(national_id, numbers)


__all__ = [
    "NATIONAL_ID_MAX_LENGTH",
    "TicketIntakeValidator",
    "TicketSelection",
    "validate_selection",
]
