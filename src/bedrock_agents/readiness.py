"""
Vector index readiness check.

A freshly created index is eventually consistent: its health goes from
unknown/red to yellow/green on its own schedule, and even a green index may
reject writes for a short while. The poller therefore checks health *and*
round-trips a canary document before declaring the index ready.
"""

import time
from collections.abc import Callable
from typing import Any

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)
from tenacity.stop import stop_base

from bedrock_agents.exceptions import SearchIndexError
from bedrock_agents.models import (
    HealthStatus,
    NOT_READY_REASON,
    ProbeResult,
    ReadinessOutcome,
    ReadinessRequest,
)
from bedrock_agents.services.search_index import SearchIndexClient

logger = structlog.get_logger(__name__)

DEFAULT_CANARY_ID = "test-doc-id"

# health, canary write, canary delete
REQUESTS_PER_PROBE = 3


class stop_before_budget(stop_base):
    """Stop when the next probe would start after the time budget ends."""

    def __init__(self, budget: float, delay: float, clock: Callable[[], float]):
        self.budget = budget
        self.delay = delay
        self.clock = clock
        self.started = clock()

    def __call__(self, retry_state: RetryCallState) -> bool:
        return self.clock() - self.started + self.delay >= self.budget


def canary_document(dimension: int) -> dict[str, Any]:
    """Synthetic document matching the knowledge base field mapping."""
    return {
        "vector": [0.0] * dimension,
        "text": "This is a test document",
        "metadata": {"test": True},
    }


class ReadinessPoller:
    """
    Bounded-retry readiness check against one search endpoint.

    Each probe cycle checks index health and, if acceptable, writes and
    deletes a canary document with a fixed id. The first fully successful
    cycle ends the check. Probe errors are logged and count as a failed
    attempt; they never propagate out of :meth:`check`.
    """

    def __init__(
        self,
        index_client: SearchIndexClient,
        canary_id: str = DEFAULT_CANARY_ID,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.index_client = index_client
        self.canary_id = canary_id
        self._sleep = sleep
        self._clock = clock

    def probe(self, request: ReadinessRequest) -> ProbeResult:
        """Run one probe cycle."""
        try:
            status = self.index_client.health(request.index_name)
        except SearchIndexError as e:
            logger.warning("Index health check failed", index_name=request.index_name, error=str(e))
            return ProbeResult(status=HealthStatus.UNKNOWN)

        if not status.acceptable:
            logger.info(
                "Index not healthy yet",
                index_name=request.index_name,
                status=status.value,
            )
            return ProbeResult(status=status)

        return ProbeResult(status=status, writable=self._canary_round_trip(request))

    def _canary_round_trip(self, request: ReadinessRequest) -> bool:
        try:
            self.index_client.put_document(
                request.index_name,
                self.canary_id,
                canary_document(request.vector_dimension),
            )
        except SearchIndexError as e:
            logger.warning("Canary write failed", index_name=request.index_name, error=str(e))
            return False

        # Always remove the canary once it has been written
        try:
            self.index_client.delete_document(request.index_name, self.canary_id)
        except SearchIndexError as e:
            logger.warning("Canary delete failed", index_name=request.index_name, error=str(e))
            return False

        return True

    def _before_sleep(self, request: ReadinessRequest) -> Callable[[RetryCallState], None]:
        def log_retry(retry_state: RetryCallState) -> None:
            logger.info(
                "Index not ready, retrying",
                index_name=request.index_name,
                attempt=retry_state.attempt_number,
                max_attempts=request.max_attempts,
                delay=request.retry_delay,
            )

        return log_retry

    def check(self, request: ReadinessRequest) -> ReadinessOutcome:
        """
        Poll until the index is ready or the budget runs out.

        With a ``time_budget`` no probe starts once the budget would be
        exceeded by the wait before it; probes already running finish.

        Args:
            request: Endpoint, index and attempt budget

        Returns:
            ``Ready`` after the first successful probe, otherwise
            ``Failed("index not ready within budget")``
        """
        stop = stop_after_attempt(request.max_attempts)
        if request.time_budget is not None:
            stop = stop | stop_before_budget(request.time_budget, request.retry_delay, self._clock)

        logger.info(
            "Starting readiness check",
            index_name=request.index_name,
            max_attempts=request.max_attempts,
            retry_delay=request.retry_delay,
            max_wait=request.budget_seconds,
            time_budget=request.time_budget,
        )
        attempts = 0

        def attempt() -> ProbeResult:
            nonlocal attempts
            attempts += 1
            logger.debug(
                "Probing index",
                index_name=request.index_name,
                attempt=attempts,
                max_attempts=request.max_attempts,
            )
            return self.probe(request)

        retrying = Retrying(
            stop=stop,
            wait=wait_fixed(request.retry_delay),
            retry=retry_if_result(lambda result: not result.ready),
            sleep=self._sleep,
            before_sleep=self._before_sleep(request),
            retry_error_callback=lambda retry_state: retry_state.outcome.result(),
        )
        result = retrying(attempt)

        if result.ready:
            logger.info(
                "Index ready",
                index_name=request.index_name,
                status=result.status.value,
                attempts=attempts,
            )
            return ReadinessOutcome.ready(attempts=attempts)

        logger.error(
            "Index not ready",
            index_name=request.index_name,
            attempts=attempts,
            last_status=result.status.value,
        )
        return ReadinessOutcome.failed(NOT_READY_REASON, attempts=attempts)
