"""Side and role enumerations.

Tokens arriving from the transport layer are parsed with
:meth:`Side.parse` / :meth:`Role.parse`, which raise
:class:`~cardball.domain.errors.InvalidEnumError` for anything unknown.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Self

from cardball.domain.errors import InvalidEnumError


class _TokenEnum(StrEnum):
    """StrEnum that accepts case-insensitive tokens with ``_`` or ``-``."""

    @classmethod
    def parse(cls, token: str | Self) -> Self:
        if isinstance(token, cls):
            return token
        normalized = str(token).strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        choices = ", ".join(m.value for m in cls)
        msg = f"Unknown {cls.__name__.lower()} {token!r}; expected one of {choices}"
        raise InvalidEnumError(msg, token=str(token), choices=[m.value for m in cls])


class Side(_TokenEnum):
    """Which team's lineup an operation targets."""

    VISITING = "visiting"
    HOME = "home"


class Role(_TokenEnum):
    """Managerial position to which a strategy directive is attached."""

    VISITING_MANAGER = "visiting-manager"
    HOME_MANAGER = "home-manager"
