"""
Exception hierarchy for the Bedrock agents support code.
"""


class BedrockAgentsError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(BedrockAgentsError):
    """The runtime environment cannot support the requested operation."""


class InvalidRequestError(BedrockAgentsError):
    """A custom-resource invocation is missing or has malformed properties."""


class SearchIndexError(BedrockAgentsError):
    """A request to the search index failed or returned an unusable response."""


class ResponseDeliveryError(BedrockAgentsError):
    """The custom-resource response could not be delivered."""


class ModelNotFoundError(BedrockAgentsError, KeyError):
    """A model key is not present in the registry."""

    def __init__(self, key: str):
        super().__init__(f"Model {key} not found in registry")
        self.key = key

    def __str__(self) -> str:
        return self.args[0]


class ResourceShapeError(BedrockAgentsError):
    """No backing mechanism is available for a logical resource."""
