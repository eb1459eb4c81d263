"""
Tests for the sample preview backend and preview request sequencing.
"""

import asyncio
import random
from typing import List

import pytest

from extract_query.core.errors import PreviewBackendError, PreviewError
from extract_query.core.models import ColumnInfo, QueryDefinition, QueryResult
from extract_query.execution import PreviewExecutor, SamplePreviewBackend, sample_value
from extract_query.query import model


class GatedBackend:
    """Backend whose calls complete only when the test releases them."""

    def __init__(self):
        self.gates: List[asyncio.Event] = []
        self.failures: List[bool] = []

    async def execute(self, query: QueryDefinition) -> QueryResult:
        gate = asyncio.Event()
        index = len(self.gates)
        self.gates.append(gate)
        self.failures.append(False)
        await gate.wait()
        if self.failures[index]:
            raise PreviewBackendError(f"call {index} failed")
        return QueryResult(
            columns=[ColumnInfo(name="call", type="number")],
            rows=[{"call": index}],
            total_rows=1,
        )


class TestSampleBackend:
    def test_columns_match_selected_fields(self, backend, claims_members_query):
        result = asyncio.run(backend.execute(claims_members_query))

        assert [c.name for c in result.columns] == [f.name for f in claims_members_query.selected_fields]
        assert [c.type for c in result.columns] == ["string", "string", "string", "decimal"]
        assert result.total_rows == len(result.rows) == 5
        assert 0 <= result.execution_time < 2

    def test_sample_rows(self, backend, field_factory):
        query = model.new_query("Samples", query_id="q")
        for name, ftype in (("name", "string"), ("born", "date"), ("amount", "decimal"), ("flag", "boolean")):
            query = model.add_field(query, field_factory(name, ftype, "s1"))

        rows = backend.synthesize(query).rows

        assert rows[0] == {"name": "Sample1", "born": "2024-03-01", "amount": 100.0, "flag": None}
        assert rows[4] == {"name": "Sample5", "born": "2024-03-05", "amount": 140.0, "flag": None}

    def test_sample_value_number(self, field_factory):
        assert sample_value(field_factory("n", "number", "s1"), 2) == 120.0

    def test_canned_result_returned_as_copy(self, backend, claims_members_query):
        canned = QueryResult(columns=[ColumnInfo(name="x", type="string")], rows=[{"x": "fixed"}], total_rows=1)
        backend.register_result("query-1", canned)

        result = asyncio.run(backend.execute(claims_members_query))
        result.rows.append({"x": "changed"})

        assert asyncio.run(backend.execute(claims_members_query)).rows == [{"x": "fixed"}]

        backend.unregister_result("query-1")
        assert asyncio.run(backend.execute(claims_members_query)).total_rows == 5

    def test_fail_next(self, backend, claims_members_query):
        backend.fail_next("database offline")

        with pytest.raises(PreviewBackendError, match="database offline"):
            asyncio.run(backend.execute(claims_members_query))
        # only the next call fails
        assert asyncio.run(backend.execute(claims_members_query)).total_rows == 5

    def test_failure_rate(self, claims_members_query):
        backend = SamplePreviewBackend(latency=0, failure_rate=1.0, rng=random.Random(1))

        with pytest.raises(PreviewBackendError):
            asyncio.run(backend.execute(claims_members_query))


class TestPreviewExecutor:
    def test_preview_stores_latest_result(self, backend, claims_members_query):
        executor = PreviewExecutor(backend)

        result = asyncio.run(executor.preview(claims_members_query))

        assert result is not None
        assert executor.latest_result is result
        assert executor.latest_query_id == "query-1"
        assert executor.latest_token == 1

    def test_backend_failure_raises_preview_error(self, backend, claims_members_query):
        executor = PreviewExecutor(backend)
        backend.fail_next("timeout")

        with pytest.raises(PreviewError) as exc_info:
            asyncio.run(executor.preview(claims_members_query))

        assert exc_info.value.query_id == "query-1"
        assert isinstance(exc_info.value.__cause__, PreviewBackendError)
        assert executor.latest_result is None

    def test_stale_response_discarded(self, claims_members_query):
        backend = GatedBackend()
        executor = PreviewExecutor(backend)

        async def scenario():
            first = asyncio.create_task(executor.preview(claims_members_query))
            await asyncio.sleep(0)
            second = asyncio.create_task(executor.preview(claims_members_query))
            await asyncio.sleep(0)

            # second request completes first, then the stale one arrives
            backend.gates[1].set()
            second_result = await second
            backend.gates[0].set()
            first_result = await first
            return first_result, second_result

        first_result, second_result = asyncio.run(scenario())

        assert first_result is None
        assert second_result.rows == [{"call": 1}]
        assert executor.latest_result.rows == [{"call": 1}]

    def test_stale_response_after_latest_does_not_overwrite(self, claims_members_query):
        backend = GatedBackend()
        executor = PreviewExecutor(backend)

        async def scenario():
            first = asyncio.create_task(executor.preview(claims_members_query))
            await asyncio.sleep(0)
            second = asyncio.create_task(executor.preview(claims_members_query))
            await asyncio.sleep(0)

            backend.gates[0].set()
            first_result = await first
            backend.gates[1].set()
            second_result = await second
            return first_result, second_result

        first_result, second_result = asyncio.run(scenario())

        assert first_result is None
        assert executor.latest_result is second_result
        assert executor.latest_token == 2

    def test_stale_failure_ignored(self, claims_members_query):
        backend = GatedBackend()
        executor = PreviewExecutor(backend)

        async def scenario():
            first = asyncio.create_task(executor.preview(claims_members_query))
            await asyncio.sleep(0)
            second = asyncio.create_task(executor.preview(claims_members_query))
            await asyncio.sleep(0)

            backend.failures[0] = True
            backend.gates[0].set()
            first_result = await first
            backend.gates[1].set()
            return first_result, await second

        first_result, second_result = asyncio.run(scenario())

        assert first_result is None
        assert second_result is not None
        assert executor.is_current(2)

    def test_invalidate_supersedes_pending_request(self, claims_members_query):
        backend = GatedBackend()
        executor = PreviewExecutor(backend)

        async def scenario():
            pending = asyncio.create_task(executor.preview(claims_members_query))
            await asyncio.sleep(0)
            executor.invalidate()
            backend.gates[0].set()
            return await pending

        assert asyncio.run(scenario()) is None
        assert executor.latest_result is None
        assert executor.latest_query_id is None

    def test_invalidate_clears_latest_result(self, backend, claims_members_query):
        executor = PreviewExecutor(backend)
        asyncio.run(executor.preview(claims_members_query))

        executor.invalidate()

        assert executor.latest_result is None
        assert not executor.is_current(1)
