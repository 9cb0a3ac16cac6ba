"""Unit tests for correlation ID propagation."""

from __future__ import annotations

import asyncio
import uuid

import pytest

from netsdr_client.correlation import (
    correlation_context,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

UUID_VERSION = 7


class TestCorrelationId:
    def test_generated_ids_are_uuid7(self) -> None:
        parsed = uuid.UUID(generate_correlation_id())
        assert parsed.version == UUID_VERSION

    def test_generated_ids_are_unique(self) -> None:
        ids = {generate_correlation_id() for _ in range(100)}
        assert len(ids) == 100

    def test_set_and_clear(self) -> None:
        set_correlation_id("abc")
        assert get_correlation_id() == "abc"
        set_correlation_id(None)
        assert get_correlation_id() is None


class TestCorrelationContext:
    def test_context_restores_previous_id(self) -> None:
        with correlation_context("outer") as outer:
            assert outer == "outer"
            with correlation_context() as inner:
                assert get_correlation_id() == inner
                assert inner != "outer"
            assert get_correlation_id() == "outer"
        assert get_correlation_id() is None

    def test_context_restored_after_exception(self) -> None:
        with pytest.raises(RuntimeError), correlation_context("req"):
            raise RuntimeError("boom")
        assert get_correlation_id() is None

    @pytest.mark.asyncio
    async def test_tasks_do_not_share_ids(self) -> None:
        async def worker(name: str) -> str | None:
            with correlation_context(name):
                await asyncio.sleep(0)
                return get_correlation_id()

        results = await asyncio.gather(worker("a"), worker("b"))
        assert results == ["a", "b"]
