"""The value every service operation returns.

Commands never see domain exceptions: a service either succeeds with a
``data`` payload or fails with a :class:`ServiceError` carrying the
stable code of the :class:`~cardball.domain.errors.CardballError` that
stopped it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from cardball.domain.errors import CardballError


class ServiceError(BaseModel):
    """Why an operation failed: ``code`` for machines, ``message`` for people."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: CardballError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=dict(exc.detail))


class ServiceResult(BaseModel):
    """Outcome of one service call.

    ``op`` names the operation (``"put_lineup"``, ``"record_action"``)
    and selects the renderer in :mod:`cardball.output.renderers`.
    ``warnings`` hold non-fatal problems such as a failing plugin hook;
    ``meta`` carries the telemetry span tree under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: CardballError) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))
