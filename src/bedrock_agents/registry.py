"""
Registry of Bedrock models used by the agents and knowledge bases.

The registry is an immutable lookup table that is passed to whatever needs
it; build one with :func:`default_registry` or from your own mapping.
"""

from collections.abc import Iterator, Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from bedrock_agents.exceptions import ModelNotFoundError


class ModelProvider(str, Enum):
    """Model vendor."""

    ANTHROPIC = "anthropic"
    AMAZON = "amazon"
    DEEPSEEK = "deepseek"


class ModelType(str, Enum):
    """What the model is used for."""

    FOUNDATION = "foundation"
    EMBEDDING = "embedding"


class ModelConfig(BaseModel):
    """A single registry record."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str
    provider: ModelProvider
    type: ModelType
    version: str
    description: str


DEFAULT_MODELS: Mapping[str, ModelConfig] = MappingProxyType({
    # Anthropic Claude
    "claude-3-7-sonnet": ModelConfig(
        id="anthropic.claude-3-7-sonnet-20250219-v1:0",
        provider=ModelProvider.ANTHROPIC,
        type=ModelType.FOUNDATION,
        version="3-7-sonnet-20250219-v1:0",
        description="Claude 3.7 Sonnet - Latest sonnet model",
    ),
    "claude-3-5-sonnet": ModelConfig(
        id="anthropic.claude-3-5-sonnet-20241022-v2:0",
        provider=ModelProvider.ANTHROPIC,
        type=ModelType.FOUNDATION,
        version="3-5-sonnet-20241022-v2:0",
        description="Claude 3.5 Sonnet - Balanced performance",
    ),
    "claude-3-haiku": ModelConfig(
        id="anthropic.claude-3-haiku-20240307-v1:0",
        provider=ModelProvider.ANTHROPIC,
        type=ModelType.FOUNDATION,
        version="3-haiku-20240307-v1:0",
        description="Claude 3 Haiku - Fast and efficient",
    ),
    # Amazon Nova
    "nova-pro": ModelConfig(
        id="amazon.nova-pro-v1:0",
        provider=ModelProvider.AMAZON,
        type=ModelType.FOUNDATION,
        version="pro-v1:0",
        description="Amazon Nova Pro - High capability model",
    ),
    "nova-lite": ModelConfig(
        id="amazon.nova-lite-v1:0",
        provider=ModelProvider.AMAZON,
        type=ModelType.FOUNDATION,
        version="lite-v1:0",
        description="Amazon Nova Lite - Efficient model",
    ),
    # DeepSeek
    "deepseek-r1": ModelConfig(
        id="deepseek.r1-v1:0",
        provider=ModelProvider.DEEPSEEK,
        type=ModelType.FOUNDATION,
        version="r1-v1:0",
        description="DeepSeek R1 - General purpose model",
    ),
    # Embeddings
    "titan-embedding": ModelConfig(
        id="amazon.titan-embed-text-v2:0",
        provider=ModelProvider.AMAZON,
        type=ModelType.EMBEDDING,
        version="v2:0",
        description="Amazon Titan Text Embeddings",
    ),
})


class ModelRegistry:
    """
    Read-only mapping from model key to :class:`ModelConfig`.

    The mapping passed in is copied, so later changes to it do not leak
    into the registry.
    """

    def __init__(self, models: Mapping[str, ModelConfig]):
        self._models: Mapping[str, ModelConfig] = MappingProxyType(dict(models))

    def __contains__(self, key: object) -> bool:
        return key in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[str]:
        return iter(self._models)

    @property
    def models(self) -> Mapping[str, ModelConfig]:
        """Read-only view of all records."""
        return self._models

    def get(self, key: str) -> ModelConfig:
        """
        Look up a model record.

        Raises:
            ModelNotFoundError: If the key is not registered
        """
        try:
            return self._models[key]
        except KeyError:
            raise ModelNotFoundError(key) from None

    def get_model_id(self, key: str) -> str:
        """Get the Bedrock model id for a key."""
        return self.get(key).id

    def by_type(self, model_type: ModelType) -> dict[str, ModelConfig]:
        """All records of the given type."""
        return {k: m for k, m in self._models.items() if m.type == model_type}

    def by_provider(self, provider: ModelProvider) -> dict[str, ModelConfig]:
        """All records from the given provider."""
        return {k: m for k, m in self._models.items() if m.provider == provider}

    def foundation_model_arn(self, key: str, region: str) -> str:
        """
        Build the ARN of a public foundation model.

        Public models have no account in their ARN, e.g.
        ``arn:aws:bedrock:us-east-1::foundation-model/amazon.titan-embed-text-v2:0``.
        """
        return f"arn:aws:bedrock:{region}::foundation-model/{self.get_model_id(key)}"

    def with_models(self, extra: Mapping[str, ModelConfig]) -> "ModelRegistry":
        """Return a new registry with ``extra`` added or overriding records."""
        return ModelRegistry({**self._models, **extra})


def default_registry() -> ModelRegistry:
    """Build a registry holding :data:`DEFAULT_MODELS`."""
    return ModelRegistry(DEFAULT_MODELS)
