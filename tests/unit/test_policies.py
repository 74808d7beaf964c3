"""Unit tests for completion policies."""

import pytest

from headlines.ingestion.interfaces import NetworkError
from headlines.orchestration.cancellation import CancellationError, CancellationToken
from headlines.orchestration.interfaces import Policy, TaskState
from headlines.orchestration.policies import (
    BestEffortReportedPolicy, BestEffortSilentPolicy, FailFastPolicy, get_policy
)
from headlines.orchestration.pool import WorkerPool
from headlines.orchestration.task import FetchTask


def settled_task(source, state, result=None, error=None):
    """Build a task already in a terminal state, without running it."""
    task = FetchTask(source, fetcher=None, pool=WorkerPool(1), token=CancellationToken())
    task._settle(state, result=result, error=error)
    return task


@pytest.fixture
def mixed_tasks():
    """A completes, B fails, C completes, D was cancelled."""
    return [
        settled_task("A", TaskState.COMPLETED, result=("a1", "a2")),
        settled_task("B", TaskState.FAILED, error=NetworkError("B", "timeout")),
        settled_task("C", TaskState.COMPLETED, result=("c1",)),
        settled_task("D", TaskState.CANCELLED, error=CancellationError("D")),
    ]


class TestGetPolicy:
    """Tests for policy lookup."""

    def test_lookup_by_enum(self):
        assert isinstance(get_policy(Policy.FAIL_FAST), FailFastPolicy)

    def test_lookup_by_value(self):
        assert isinstance(get_policy("best_effort_silent"), BestEffortSilentPolicy)
        assert isinstance(get_policy("best_effort_reported"), BestEffortReportedPolicy)

    def test_policy_instance_passes_through(self):
        policy = BestEffortReportedPolicy()
        assert get_policy(policy) is policy

    def test_unknown_policy(self):
        with pytest.raises(ValueError, match="unknown policy"):
            get_policy("retry_forever")


class TestCompose:
    """Tests for the pure composition half of each policy."""

    def test_silent_drops_failures(self, mixed_tasks):
        result = BestEffortSilentPolicy().compose(mixed_tasks)

        assert result.titles == ("a1", "a2", "c1")
        assert result.succeeded_count == 2
        assert result.failed_count == 2
        assert result.failures == ()
        assert result.aborted is False
        assert result.error is None

    def test_reported_lists_failures_in_source_order(self, mixed_tasks):
        result = BestEffortReportedPolicy().compose(mixed_tasks)

        assert result.titles == ("a1", "a2", "c1")
        assert result.failed_count == 2
        assert [f.source for f in result.failures] == ["B", "D"]
        assert isinstance(result.failures[0].error, NetworkError)
        assert isinstance(result.failures[1].error, CancellationError)
        assert result.policy == Policy.BEST_EFFORT_REPORTED

    def test_fail_fast_aborted_has_no_titles(self, mixed_tasks):
        error = mixed_tasks[1].error
        result = FailFastPolicy().compose(mixed_tasks, error)

        assert result.aborted is True
        assert result.error is error
        assert result.titles == ()
        assert result.succeeded_count + result.failed_count == len(mixed_tasks)

    def test_fail_fast_all_completed(self):
        tasks = [
            settled_task("A", TaskState.COMPLETED, result=("a1",)),
            settled_task("B", TaskState.COMPLETED, result=()),
            settled_task("C", TaskState.COMPLETED, result=("c1", "c2")),
        ]
        result = FailFastPolicy().compose(tasks)

        assert result.aborted is False
        assert result.titles == ("a1", "c1", "c2")
        assert result.succeeded_count == 3
        assert result.failed_count == 0
        assert not result.has_failures

    def test_result_to_dict(self, mixed_tasks):
        data = BestEffortReportedPolicy().compose(mixed_tasks).to_dict()

        assert data["policy"] == "best_effort_reported"
        assert data["titles"] == ["a1", "a2", "c1"]
        assert data["failures"][0] == {
            "source": "B",
            "error": "B: timeout",
            "error_type": "NetworkError",
        }


@pytest.mark.asyncio
class TestWait:
    """Tests for the waiting half of each policy."""

    async def test_fail_fast_returns_first_error_in_submission_order(
        self, stub_fetcher_factory, pool
    ):
        """The earlier source's error wins even if a later one fails first."""
        first = NetworkError("A", "slow failure")
        second = NetworkError("B", "fast failure")
        fetcher = stub_fetcher_factory({"A": first, "B": second}, delays={"A": 0.05})
        token = CancellationToken()
        tasks = [FetchTask(s, fetcher, pool, token).start() for s in ("A", "B")]

        error = await FailFastPolicy().wait(tasks, token)

        assert error is first
        assert token.cancelled

    async def test_best_effort_waits_for_every_task(self, stub_fetcher_factory, pool, abc_outcomes):
        fetcher = stub_fetcher_factory(abc_outcomes, delays={"A": 0.03})
        token = CancellationToken()
        tasks = [FetchTask(s, fetcher, pool, token).start() for s in ("A", "B", "C")]

        assert await BestEffortSilentPolicy().wait(tasks, token) is None
        assert all(t.settled for t in tasks)
        assert not token.cancelled
