"""Completion policies: how to wait on tasks and how to combine outcomes.

A policy has two halves. wait() walks the tasks in submission order and
returns the error that should abort the aggregation, or None. compose()
is a pure function over settled tasks that builds the AggregationResult.
Neither half performs I/O.
"""

from typing import Dict, List, Optional, Sequence, Union

from .cancellation import CancellationToken
from .interfaces import AggregationResult, Policy, SourceFailure, TaskState
from .task import FetchTask


class CompletionPolicy:
    """Interface for completion policies."""

    policy: Policy

    async def wait(self, tasks: Sequence[FetchTask], token: CancellationToken) -> Optional[BaseException]:
        """Wait on tasks; return the triggering error or None."""
        raise NotImplementedError

    def compose(self, tasks: Sequence[FetchTask], error: Optional[BaseException] = None) -> AggregationResult:
        """Build the result from settled tasks, in submission order."""
        raise NotImplementedError

    def _titles(self, tasks: Sequence[FetchTask]) -> List[str]:
        titles = []
        for task in tasks:
            if task.state is TaskState.COMPLETED:
                titles.extend(task.result)
        return titles

    def _succeeded(self, tasks: Sequence[FetchTask]) -> int:
        return sum(1 for t in tasks if t.state is TaskState.COMPLETED)


class FailFastPolicy(CompletionPolicy):
    """Abort the whole aggregation on the first failure seen."""

    policy = Policy.FAIL_FAST

    async def wait(self, tasks, token):
        for task in tasks:
            try:
                await task.await_result()
            except Exception as e:
                token.cancel(f"sibling {task.source} failed: {type(e).__name__}")
                for sibling in tasks:
                    sibling.cancel(token.reason)
                return e
        return None

    def compose(self, tasks, error=None):
        succeeded = self._succeeded(tasks)
        if error is not None:
            return AggregationResult(
                policy=self.policy,
                titles=(),
                succeeded_count=succeeded,
                failed_count=len(tasks) - succeeded,
                aborted=True,
                error=error,
            )
        return AggregationResult(
            policy=self.policy,
            titles=tuple(self._titles(tasks)),
            succeeded_count=succeeded,
            failed_count=len(tasks) - succeeded,
        )


class BestEffortSilentPolicy(CompletionPolicy):
    """Keep whatever completed and drop failures without reporting them.

    Only counts reveal that something failed. Prefer BestEffortReportedPolicy
    for new callers.
    """

    policy = Policy.BEST_EFFORT_SILENT

    async def wait(self, tasks, token):
        for task in tasks:
            await task.await_settled()
        return None

    def compose(self, tasks, error=None):
        succeeded = self._succeeded(tasks)
        return AggregationResult(
            policy=self.policy,
            titles=tuple(self._titles(tasks)),
            succeeded_count=succeeded,
            failed_count=len(tasks) - succeeded,
        )


class BestEffortReportedPolicy(BestEffortSilentPolicy):
    """Keep whatever completed and report every failing source."""

    policy = Policy.BEST_EFFORT_REPORTED

    def compose(self, tasks, error=None):
        silent = super().compose(tasks, error)
        failures = tuple(
            SourceFailure(source=t.source, error=t.error)
            for t in tasks
            if t.state is not TaskState.COMPLETED
        )
        return AggregationResult(
            policy=self.policy,
            titles=silent.titles,
            succeeded_count=silent.succeeded_count,
            failed_count=silent.failed_count,
            failures=failures,
        )


POLICIES: Dict[Policy, CompletionPolicy] = {
    Policy.FAIL_FAST: FailFastPolicy(),
    Policy.BEST_EFFORT_SILENT: BestEffortSilentPolicy(),
    Policy.BEST_EFFORT_REPORTED: BestEffortReportedPolicy(),
}


def get_policy(policy: Union[Policy, str]) -> CompletionPolicy:
    """Look up a policy by enum member or its string value."""
    if isinstance(policy, CompletionPolicy):
        return policy
    try:
        return POLICIES[Policy(policy)]
    except ValueError:
        valid = ", ".join(p.value for p in Policy)
        raise ValueError(f"unknown policy {policy!r}; expected one of: {valid}") from None
