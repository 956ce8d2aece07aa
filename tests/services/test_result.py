"""Tests for ServiceResult and ServiceError."""

import pydantic
import pytest

from cardball.domain.errors import ConflictError, ValidationError
from cardball.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="get_game")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="get_game")
        with pytest.raises(pydantic.ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_failure_copies_error(self) -> None:
        exc = ValidationError("Batting order 2 is assigned more than once", batting_order=2)
        result = ServiceResult.failure("put_lineup", exc)
        assert not result.ok
        assert result.op == "put_lineup"
        assert result.error == ServiceError(
            code="VALIDATION",
            message="Batting order 2 is assigned more than once",
            detail={"batting_order": 2},
        )

    def test_json_dump(self) -> None:
        result = ServiceResult.failure("put_lineup", ConflictError("stale", version=3))
        payload = result.model_dump(mode="json")
        assert payload["error"]["code"] == "CONFLICT"
        assert payload["error"]["detail"] == {"version": 3}
