"""Tests for ServiceResult and ServiceError."""

import json

import pytest

from lambdaplay.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="save_expression", data={"name": "id"})
        assert result.ok is True
        assert result.op == "save_expression"
        assert result.data == {"name": "id"}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_helper(self) -> None:
        result = ServiceResult.failure("apply", "NOT_FOUND", "missing", name="K")
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.message == "missing"
        assert result.error.detail == {"name": "K"}

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="reduce", data={"to": "y"}, meta={"duration_ms": 3})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["to"] == "y"
        assert parsed["meta"]["duration_ms"] == 3

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_default_detail(self) -> None:
        error = ServiceError(code="E001", message="bad")
        assert error.detail == {}
