"""Concurrent fetch orchestration - tasks, policies and the worker pool."""

from .cancellation import CancellationError, CancellationToken
from .interfaces import Policy, TaskState, TaskOutcome, SourceFailure, AggregationResult
from .pool import WorkerPool, get_worker_pool, shutdown_worker_pool
from .task import FetchTask
from .policies import (
    CompletionPolicy, FailFastPolicy, BestEffortSilentPolicy,
    BestEffortReportedPolicy, get_policy
)
from .orchestrator import Orchestrator, aggregate_headlines

__all__ = [
    "CancellationError", "CancellationToken",
    "Policy", "TaskState", "TaskOutcome", "SourceFailure", "AggregationResult",
    "WorkerPool", "get_worker_pool", "shutdown_worker_pool",
    "FetchTask",
    "CompletionPolicy", "FailFastPolicy", "BestEffortSilentPolicy",
    "BestEffortReportedPolicy", "get_policy",
    "Orchestrator", "aggregate_headlines",
]
