"""
Tests for the Bedrock model registry.
"""

import pytest

from bedrock_agents.exceptions import ModelNotFoundError
from bedrock_agents.registry import (
    DEFAULT_MODELS,
    ModelConfig,
    ModelProvider,
    ModelRegistry,
    ModelType,
    default_registry,
)


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def custom_model():
    return ModelConfig(
        id="test.model-v1:0",
        provider=ModelProvider.AMAZON,
        type=ModelType.FOUNDATION,
        version="v1:0",
        description="Test fixture model",
    )


class TestLookup:
    """Tests for registry lookups."""

    def test_get_model(self, registry):
        model = registry.get("claude-3-haiku")

        assert model.id == "anthropic.claude-3-haiku-20240307-v1:0"
        assert model.provider == ModelProvider.ANTHROPIC
        assert model.type == ModelType.FOUNDATION

    def test_get_model_id(self, registry):
        assert registry.get_model_id("titan-embedding") == "amazon.titan-embed-text-v2:0"

    def test_unknown_key(self, registry):
        with pytest.raises(ModelNotFoundError, match="gpt-4 not found"):
            registry.get("gpt-4")

    def test_unknown_key_is_a_key_error(self, registry):
        with pytest.raises(KeyError):
            registry.get_model_id("gpt-4")

    def test_contains_and_len(self, registry):
        assert "nova-pro" in registry
        assert "gpt-4" not in registry
        assert len(registry) == len(DEFAULT_MODELS) == 7
        assert set(registry) == set(DEFAULT_MODELS)

    def test_foundation_model_arn(self, registry):
        arn = registry.foundation_model_arn("titan-embedding", "us-east-1")

        assert arn == "arn:aws:bedrock:us-east-1::foundation-model/amazon.titan-embed-text-v2:0"


class TestFilters:
    """Tests for filtering by type and provider."""

    def test_by_type(self, registry):
        embeddings = registry.by_type(ModelType.EMBEDDING)

        assert list(embeddings) == ["titan-embedding"]

    def test_by_provider(self, registry):
        anthropic = registry.by_provider(ModelProvider.ANTHROPIC)

        assert set(anthropic) == {"claude-3-7-sonnet", "claude-3-5-sonnet", "claude-3-haiku"}

    def test_by_provider_deepseek(self, registry):
        assert list(registry.by_provider(ModelProvider.DEEPSEEK)) == ["deepseek-r1"]


class TestImmutability:
    """Tests that registries are isolated lookup tables."""

    def test_source_mapping_is_copied(self, custom_model):
        source = {"test-model": custom_model}
        registry = ModelRegistry(source)

        source["other"] = custom_model

        assert "other" not in registry

    def test_models_view_is_read_only(self, registry, custom_model):
        with pytest.raises(TypeError):
            registry.models["test-model"] = custom_model

    def test_records_are_frozen(self, registry):
        with pytest.raises(ValueError):
            registry.get("nova-lite").id = "changed"

    def test_with_models_returns_new_registry(self, registry, custom_model):
        extended = registry.with_models({"test-model": custom_model})

        assert "test-model" in extended
        assert "test-model" not in registry

    def test_fixture_registry(self, custom_model):
        registry = ModelRegistry({"test-model": custom_model})

        assert registry.get_model_id("test-model") == "test.model-v1:0"
        assert "claude-3-haiku" not in registry
