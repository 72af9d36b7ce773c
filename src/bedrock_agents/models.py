"""
Data models for the index readiness check.

Defines the readiness request/outcome types and the CloudFormation
custom-resource event and response shapes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HealthStatus(str, Enum):
    """Cluster/index health as reported by the search service."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    UNKNOWN = "unknown"

    @classmethod
    def from_response(cls, value: Any) -> "HealthStatus":
        """Map a raw ``status`` value to a health status, defaulting to unknown."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN

    @property
    def acceptable(self) -> bool:
        """Green and yellow indexes can serve traffic."""
        return self in (HealthStatus.GREEN, HealthStatus.YELLOW)


class ReadinessRequest(BaseModel):
    """Parameters for one readiness check. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(..., min_length=1, description="Search endpoint host")
    index_name: str = Field(..., min_length=1)
    max_attempts: int = Field(default=30, ge=1)
    retry_delay: float = Field(default=10.0, ge=0, description="Seconds between attempts")
    time_budget: float | None = Field(
        default=None,
        gt=0,
        description="Optional wall-clock limit in seconds across all attempts",
    )
    vector_dimension: int = Field(default=1536, ge=1)

    @field_validator("endpoint")
    @classmethod
    def normalize_endpoint(cls, v: str) -> str:
        host = v.strip()
        for scheme in ("https://", "http://"):
            if host.lower().startswith(scheme):
                host = host[len(scheme):]
        host = host.rstrip("/")
        if not host:
            raise ValueError("Endpoint must not be empty")
        return host

    @property
    def budget_seconds(self) -> float:
        """Total sleep time if every attempt fails."""
        return (self.max_attempts - 1) * self.retry_delay


@dataclass(frozen=True)
class ProbeResult:
    """Transient result of a single probe cycle."""

    status: HealthStatus
    writable: bool = False

    @property
    def ready(self) -> bool:
        return self.status.acceptable and self.writable


class OutcomeStatus(str, Enum):
    """Terminal state of a readiness check."""

    READY = "ready"
    FAILED = "failed"


NOT_READY_REASON = "index not ready within budget"


@dataclass(frozen=True)
class ReadinessOutcome:
    """Result of a readiness check, produced exactly once per request."""

    status: OutcomeStatus
    reason: str | None = None
    attempts: int = 0

    @classmethod
    def ready(cls, attempts: int = 0) -> "ReadinessOutcome":
        """Create a ready outcome."""
        return cls(status=OutcomeStatus.READY, attempts=attempts)

    @classmethod
    def failed(cls, reason: str = NOT_READY_REASON, attempts: int = 0) -> "ReadinessOutcome":
        """Create a failed outcome."""
        return cls(status=OutcomeStatus.FAILED, reason=reason, attempts=attempts)

    @property
    def is_ready(self) -> bool:
        return self.status == OutcomeStatus.READY


class RequestType(str, Enum):
    """CloudFormation custom-resource request types."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class ResponseStatus(str, Enum):
    """Status values accepted by the CloudFormation callback."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class CustomResourceEvent(BaseModel):
    """Inbound custom-resource event as delivered to the Lambda."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_type: RequestType = Field(..., alias="RequestType")
    response_url: str = Field(..., alias="ResponseURL")
    stack_id: str = Field(..., alias="StackId")
    request_id: str = Field(..., alias="RequestId")
    logical_resource_id: str = Field(..., alias="LogicalResourceId")
    physical_resource_id: str | None = Field(default=None, alias="PhysicalResourceId")
    resource_type: str | None = Field(default=None, alias="ResourceType")
    resource_properties: dict[str, Any] = Field(default_factory=dict, alias="ResourceProperties")
    old_resource_properties: dict[str, Any] | None = Field(
        default=None,
        alias="OldResourceProperties",
    )

    @property
    def resolved_physical_id(self) -> str:
        """Physical id to report; stable across updates of the same resource."""
        return self.physical_resource_id or self.logical_resource_id


class CustomResourceResponse(BaseModel):
    """Outbound response body sent to the ResponseURL."""

    model_config = ConfigDict(populate_by_name=True)

    status: ResponseStatus = Field(..., alias="Status")
    reason: str = Field(..., alias="Reason")
    physical_resource_id: str = Field(..., alias="PhysicalResourceId")
    stack_id: str = Field(..., alias="StackId")
    request_id: str = Field(..., alias="RequestId")
    logical_resource_id: str = Field(..., alias="LogicalResourceId")
    data: dict[str, Any] = Field(default_factory=dict, alias="Data")

    def to_json(self) -> str:
        """Serialize with the CloudFormation field names."""
        return self.model_dump_json(by_alias=True)
