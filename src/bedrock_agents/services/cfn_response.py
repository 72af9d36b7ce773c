"""
CloudFormation custom-resource response delivery.

Sends the single response a custom resource owes CloudFormation by PUTting
a JSON document to the pre-signed ResponseURL from the event.
"""

from typing import Any

import requests
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from bedrock_agents.exceptions import ResponseDeliveryError
from bedrock_agents.models import (
    CustomResourceEvent,
    CustomResourceResponse,
    ResponseStatus,
)

logger = structlog.get_logger(__name__)

DEFAULT_REASON = "See the details in CloudWatch Log Stream"


def build_response(
    event: CustomResourceEvent,
    status: ResponseStatus,
    data: dict[str, Any] | None = None,
    reason: str | None = None,
    log_stream_name: str | None = None,
) -> CustomResourceResponse:
    """Build the response body for an event."""
    if not reason:
        reason = f"{DEFAULT_REASON}: {log_stream_name}" if log_stream_name else DEFAULT_REASON
    return CustomResourceResponse(
        status=status,
        reason=reason,
        physical_resource_id=event.resolved_physical_id,
        stack_id=event.stack_id,
        request_id=event.request_id,
        logical_resource_id=event.logical_resource_id,
        data=data or {},
    )


class ResponseSender:
    """Delivers custom-resource responses to CloudFormation."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    @retry(
        retry=retry_if_exception_type(requests.RequestException),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _put(self, url: str, body: str) -> requests.Response:
        # The pre-signed URL is signed for an empty content type
        response = requests.put(
            url,
            data=body.encode("utf-8"),
            headers={"content-type": "", "content-length": str(len(body.encode("utf-8")))},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    def send(self, event: CustomResourceEvent, response: CustomResourceResponse) -> None:
        """
        PUT the response to the event's ResponseURL.

        Raises:
            ResponseDeliveryError: If every delivery attempt fails
        """
        body = response.to_json()
        try:
            result = self._put(event.response_url, body)
        except requests.RequestException as e:
            logger.error(
                "Failed to send custom resource response",
                request_id=event.request_id,
                status=response.status.value,
                error=str(e),
            )
            raise ResponseDeliveryError(f"Could not deliver response: {e}") from e

        logger.info(
            "Custom resource response sent",
            request_id=event.request_id,
            status=response.status.value,
            http_status=result.status_code,
        )
