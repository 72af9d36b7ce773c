"""
Pytest configuration and fixtures for the Bedrock agents tests.
"""

import os
from dataclasses import dataclass, field

import pytest

# Set test environment variables
os.environ["APP_ENV"] = "development"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["LOG_LEVEL"] = "WARNING"

from bedrock_agents.exceptions import SearchIndexError  # noqa: E402
from bedrock_agents.models import HealthStatus  # noqa: E402


@dataclass
class Step:
    """Scripted behaviour of the fake index for one probe cycle."""

    health: HealthStatus | Exception = HealthStatus.GREEN
    write_ok: bool = True
    delete_ok: bool = True


@dataclass
class FakeIndexClient:
    """
    In-memory stand-in for SearchIndexClient.

    Each health() call starts a new probe cycle and consumes one step; the
    last step repeats once the script runs out.
    """

    steps: list[Step]
    calls: list[tuple] = field(default_factory=list)
    documents: dict[str, dict] = field(default_factory=dict)
    _step: Step | None = None

    def health(self, index_name):
        self._step = self.steps.pop(0) if len(self.steps) > 1 else self.steps[0]
        self.calls.append(("health", index_name))
        if isinstance(self._step.health, Exception):
            raise self._step.health
        return self._step.health

    def put_document(self, index_name, document_id, body):
        self.calls.append(("put", index_name, document_id))
        if not self._step.write_ok:
            raise SearchIndexError("write rejected")
        self.documents[document_id] = body
        return {"result": "created"}

    def delete_document(self, index_name, document_id):
        self.calls.append(("delete", index_name, document_id))
        if not self._step.delete_ok:
            raise SearchIndexError("delete rejected")
        self.documents.pop(document_id, None)
        return {"result": "deleted"}

    @property
    def probes(self) -> int:
        return sum(1 for call in self.calls if call[0] == "health")


class RecordingSender:
    """Response sender that keeps what it was asked to send."""

    def __init__(self):
        self.sent = []

    def send(self, event, response):
        self.sent.append((event, response))


class FakeLambdaContext:
    """Minimal Lambda context object."""

    log_stream_name = "2026/10/19/[$LATEST]abcdef"

    def __init__(self, remaining_ms: int = 600_000):
        self.remaining_ms = remaining_ms

    def get_remaining_time_in_millis(self) -> int:
        return self.remaining_ms


@pytest.fixture
def settings():
    """Create test settings."""
    from bedrock_agents.config import Settings
    return Settings()


@pytest.fixture
def fake_index():
    """Factory for scripted fake index clients."""
    def _make(*steps: Step) -> FakeIndexClient:
        return FakeIndexClient(steps=list(steps) or [Step()])
    return _make


@pytest.fixture
def sleeps():
    """List recording every sleep requested by the poller."""
    return []


@pytest.fixture
def sender():
    """Create a recording response sender."""
    return RecordingSender()


@pytest.fixture
def lambda_context():
    """Create a fake Lambda context."""
    return FakeLambdaContext()


@pytest.fixture
def make_event():
    """Factory for CloudFormation custom-resource events."""
    def _make(request_type: str = "Create", **properties) -> dict:
        event = {
            "RequestType": request_type,
            "ResponseURL": "https://cloudformation-custom-resource-response.s3.amazonaws.com/signed",
            "StackId": "arn:aws:cloudformation:us-east-1:123456789012:stack/agents/guid",
            "RequestId": "req-1234",
            "LogicalResourceId": "IndexCheckerResource",
            "ResourceType": "Custom::IndexReadiness",
            "ResourceProperties": {
                "ServiceToken": "arn:aws:lambda:us-east-1:123456789012:function:checker",
                "endpoint": "search.example",
                "indexName": "vec-idx",
                "timestamp": "1760000000000",
                **properties,
            },
        }
        return event
    return _make


@pytest.fixture
def step():
    """Expose the Step type to tests."""
    return Step
