"""
Custom-resource Lambda that blocks a deployment until a vector index is usable.

Deploy it as the service token of a custom resource with properties
``endpoint`` and ``indexName`` (plus a changing ``timestamp`` to force a
re-check on every deployment). Optional ``maxAttempts``, ``retryDelay`` and
``vectorDimension`` override the configured defaults.
"""

import time
from collections.abc import Callable
from functools import lru_cache
from typing import Any

import structlog
from pydantic import ValidationError

from bedrock_agents.config import Settings, get_settings
from bedrock_agents.exceptions import InvalidRequestError
from bedrock_agents.logging_config import configure_logging
from bedrock_agents.models import (
    CustomResourceEvent,
    CustomResourceResponse,
    ReadinessRequest,
    RequestType,
    ResponseStatus,
)
from bedrock_agents.readiness import REQUESTS_PER_PROBE, ReadinessPoller
from bedrock_agents.services.cfn_response import ResponseSender, build_response
from bedrock_agents.services.search_index import SearchIndexClient

logger = structlog.get_logger(__name__)

REQUIRED_PROPERTIES = ("endpoint", "indexName")


class IndexReadinessHandler:
    """
    Handles Create/Update/Delete events for the index readiness resource.

    Exactly one response is sent per invocation.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        poller_factory: Callable[[ReadinessRequest], ReadinessPoller] | None = None,
        sender: ResponseSender | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or get_settings()
        self.sender = sender or ResponseSender(timeout=self.settings.readiness.request_timeout)
        self._sleep = sleep
        self._poller_factory = poller_factory or self._default_poller

    def _default_poller(self, request: ReadinessRequest) -> ReadinessPoller:
        return ReadinessPoller(
            SearchIndexClient(request.endpoint, settings=self.settings),
            canary_id=self.settings.readiness.canary_document_id,
            sleep=self._sleep,
        )

    def _time_budget(self, context: Any) -> float | None:
        """
        Seconds during which the poller may start new probes.

        Leaves room for one full probe cycle plus the response margin, so
        a probe started just before the deadline still finishes in time.
        """
        remaining = getattr(context, "get_remaining_time_in_millis", None)
        if remaining is None:
            return None
        readiness = self.settings.readiness
        probe_allowance = REQUESTS_PER_PROBE * readiness.request_timeout
        budget = remaining() / 1000 - readiness.response_margin - probe_allowance
        return max(budget, 1.0)

    def build_request(self, event: CustomResourceEvent, context: Any = None) -> ReadinessRequest:
        """
        Build the readiness request from the event's resource properties.

        Raises:
            InvalidRequestError: If required properties are missing or invalid
        """
        props = event.resource_properties
        missing = [name for name in REQUIRED_PROPERTIES if not props.get(name)]
        if missing:
            raise InvalidRequestError(f"Missing required properties: {', '.join(missing)}")

        defaults = self.settings.readiness
        try:
            return ReadinessRequest(
                endpoint=props["endpoint"],
                index_name=props["indexName"],
                max_attempts=props.get("maxAttempts", defaults.max_attempts),
                retry_delay=props.get("retryDelay", defaults.retry_delay),
                vector_dimension=props.get("vectorDimension", defaults.vector_dimension),
                time_budget=self._time_budget(context),
            )
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid resource properties: {e}") from e

    def _check_index(self, event: CustomResourceEvent, context: Any) -> CustomResourceResponse:
        log_stream = getattr(context, "log_stream_name", None)

        try:
            request = self.build_request(event, context)
        except InvalidRequestError as e:
            logger.error("Rejecting invalid readiness request", error=str(e))
            return build_response(event, ResponseStatus.FAILED, reason=str(e))

        logger.info(
            "Checking index readiness",
            endpoint=request.endpoint,
            index_name=request.index_name,
            max_attempts=request.max_attempts,
            retry_delay=request.retry_delay,
        )

        try:
            outcome = self._poller_factory(request).check(request)
        except Exception as e:
            # CloudFormation waits for up to an hour if no response arrives
            logger.exception("Readiness check aborted", index_name=request.index_name)
            return build_response(event, ResponseStatus.FAILED, reason=str(e) or type(e).__name__)

        if outcome.is_ready:
            return build_response(
                event,
                ResponseStatus.SUCCESS,
                data={"IndexStatus": "Ready", "IndexName": request.index_name},
                log_stream_name=log_stream,
            )
        return build_response(event, ResponseStatus.FAILED, reason=outcome.reason)

    def __call__(self, event: dict[str, Any], context: Any = None) -> dict[str, Any]:
        """
        Lambda entry point.

        Returns:
            The response body that was sent to CloudFormation
        """
        try:
            cfn_event = CustomResourceEvent.model_validate(event)
        except ValidationError as e:
            logger.error("Malformed custom resource event", error=str(e))
            if not isinstance(event, dict) or not event.get("ResponseURL"):
                # Without a ResponseURL there is nobody to answer
                raise InvalidRequestError(f"Malformed custom resource event: {e}") from e
            return self._answer_malformed(event, e, context)

        structlog.contextvars.bind_contextvars(
            request_id=cfn_event.request_id,
            request_type=cfn_event.request_type.value,
            logical_resource_id=cfn_event.logical_resource_id,
        )
        try:
            logger.info("Received custom resource event")

            if cfn_event.request_type == RequestType.DELETE:
                # Tear-down is never blocked on index state
                response = build_response(
                    cfn_event,
                    ResponseStatus.SUCCESS,
                    log_stream_name=getattr(context, "log_stream_name", None),
                )
            else:
                response = self._check_index(cfn_event, context)

            self.sender.send(cfn_event, response)
            return response.model_dump(by_alias=True, mode="json")
        finally:
            structlog.contextvars.clear_contextvars()

    def _answer_malformed(
        self,
        event: dict[str, Any],
        error: ValidationError,
        context: Any,
    ) -> dict[str, Any]:
        """Best-effort reply to an event that fails validation but can be routed."""
        # Tear-down is never blocked, even on a malformed event
        is_delete = event.get("RequestType") == RequestType.DELETE.value
        logical_id = str(event.get("LogicalResourceId") or "")
        routing = CustomResourceEvent.model_construct(
            request_type=RequestType.DELETE if is_delete else RequestType.CREATE,
            response_url=str(event["ResponseURL"]),
            stack_id=str(event.get("StackId") or ""),
            request_id=str(event.get("RequestId") or ""),
            logical_resource_id=logical_id,
            physical_resource_id=str(event.get("PhysicalResourceId") or logical_id or "unknown"),
        )
        if is_delete:
            response = build_response(
                routing,
                ResponseStatus.SUCCESS,
                log_stream_name=getattr(context, "log_stream_name", None),
            )
        else:
            reason = f"Malformed custom resource event: {error.error_count()} validation error(s)"
            response = build_response(routing, ResponseStatus.FAILED, reason=reason)

        self.sender.send(routing, response)
        return response.model_dump(by_alias=True, mode="json")


@lru_cache
def _default_handler() -> IndexReadinessHandler:
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=True)
    return IndexReadinessHandler(settings)


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda handler."""
    return _default_handler()(event, context)
