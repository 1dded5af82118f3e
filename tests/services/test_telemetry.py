"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from lambdaplay.services.result import ServiceResult
from lambdaplay.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="test").duration_ms == 0.0

    def test_to_dict_omits_empty_parts(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "children" not in d
        assert "annotations" not in d

    def test_annotate(self) -> None:
        span = Span(name="test")
        span.annotate("changed", True)
        assert span.to_dict()["annotations"] == {"changed": True}


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("child") as span:
            assert span is None

    def test_no_parent_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("child") as span:
            assert span is None


class TestTraced:
    def test_disabled_passes_through(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="op")

        assert op().meta is None

    def test_enabled_injects_span_tree(self) -> None:
        @traced
        def op() -> ServiceResult:
            with trace_span("phase") as span:
                assert span is not None
                span.annotate("n", 1)
            return ServiceResult(ok=True, op="op", meta={"kept": True})

        enable_telemetry()
        result = op()
        assert result.meta is not None
        assert result.meta["kept"] is True
        tree = result.meta["telemetry"]
        assert tree["name"].endswith("op")
        assert tree["children"][0]["name"] == "phase"
        assert tree["children"][0]["annotations"] == {"n": 1}

    def test_non_result_values_pass_through(self) -> None:
        @traced
        def op() -> int:
            return 7

        enable_telemetry()
        assert op() == 7

    def test_exception_resets_span(self) -> None:
        @traced
        def op() -> None:
            raise RuntimeError("boom")

        enable_telemetry()
        with pytest.raises(RuntimeError):
            op()
        assert get_current_span() is None

    def test_nested_calls_become_children(self) -> None:
        @traced
        def inner() -> ServiceResult:
            return ServiceResult(ok=True, op="inner")

        @traced
        def outer() -> ServiceResult:
            assert inner().meta is None
            return ServiceResult(ok=True, op="outer")

        enable_telemetry()
        tree = outer().meta["telemetry"]  # type: ignore[index]
        assert [child["name"] for child in tree["children"]] == [inner.__qualname__]
