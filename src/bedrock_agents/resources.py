"""
Logical resource shapes and naming rules for knowledge base storage.

A logical resource (an action group, a vector collection, ...) is either
declared directly through a native CloudFormation type or provisioned by a
custom resource. Both shapes expose the same identifier and ARN, so callers
do not need to care which one they got.
"""

import re
import string
import time
from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum

from bedrock_agents.exceptions import ResourceShapeError

MAX_COLLECTION_NAME_LENGTH = 32
DEFAULT_VECTOR_INDEX_NAME = "vector-index"

_BASE36_DIGITS = string.digits + string.ascii_lowercase
_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9-]")


class ResourceShape(str, Enum):
    """How a logical resource is backed."""

    MANAGED = "managed"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ManagedDeclaration:
    """Resource declared through a native CloudFormation type."""

    identifier: str
    arn: str
    resource_type: str

    @property
    def shape(self) -> ResourceShape:
        return ResourceShape.MANAGED


@dataclass(frozen=True)
class CustomProvisioned:
    """Resource created by a custom-resource provider."""

    identifier: str
    arn: str
    resource_type: str
    service_token: str

    @property
    def shape(self) -> ResourceShape:
        return ResourceShape.CUSTOM


ProvisionedResource = ManagedDeclaration | CustomProvisioned


def select_shape(
    resource_type: str,
    identifier: str,
    arn: str,
    supported_types: Collection[str],
    service_token: str | None = None,
) -> ProvisionedResource:
    """
    Pick the backing mechanism for a logical resource.

    Native declaration wins when the target environment supports the
    resource type; otherwise a custom-resource provider is used.

    Args:
        resource_type: CloudFormation type, e.g. ``AWS::Bedrock::AgentActionGroup``
        identifier: Logical name of the resource
        arn: ARN (or ARN-equivalent token) of the resource
        supported_types: Resource types the target environment can declare natively
        service_token: ARN of a custom-resource provider, if one is deployed

    Raises:
        ResourceShapeError: If neither mechanism is available
    """
    if resource_type in supported_types:
        return ManagedDeclaration(identifier=identifier, arn=arn, resource_type=resource_type)
    if service_token:
        return CustomProvisioned(
            identifier=identifier,
            arn=arn,
            resource_type=resource_type,
            service_token=service_token,
        )
    raise ResourceShapeError(
        f"{resource_type} is not supported natively and no custom provider is available"
    )


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("Value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def validate_collection_name(name: str) -> str:
    """
    Coerce a name into a valid OpenSearch Serverless resource name.

    Names must start with a lowercase letter and be at most 32 characters.
    """
    valid = name if re.match(r"[a-z]", name) else f"a{name}"
    return valid[:MAX_COLLECTION_NAME_LENGTH]


def collection_name_for(knowledge_base_name: str, unique_id: str | None = None) -> str:
    """
    Derive a short, unique collection name from a knowledge base name.

    ``portfolio-creator-knowledge-base`` becomes ``pckb-kb-col-<id>`` where
    ``<id>`` defaults to the current epoch second in base 36.
    """
    abbreviation = "".join(part[:1] for part in knowledge_base_name.split("-"))
    unique_id = unique_id or to_base36(int(time.time()))
    raw = f"{abbreviation}-kb-col-{unique_id}".lower()
    return validate_collection_name(_INVALID_NAME_CHARS.sub("-", raw))


def security_policy_names(collection_name: str) -> dict[str, str]:
    """Names of the encryption, network and data access policies for a collection."""
    return {
        "encryption": validate_collection_name(f"{collection_name}-enc-pol"),
        "network": validate_collection_name(f"{collection_name}-net-pol"),
        "data": validate_collection_name(f"{collection_name}-acc-pol"),
    }


def vector_index_name(collection_name: str, index_name: str = DEFAULT_VECTOR_INDEX_NAME) -> str:
    """Name of the vector index actually created inside a new collection."""
    return f"{collection_name}-{index_name}"


def collection_arn(region: str, account: str, collection_name: str) -> str:
    """ARN of an OpenSearch Serverless collection referenced by name."""
    return f"arn:aws:aoss:{region}:{account}:collection/{collection_name}"
