"""
Tests for configuration settings.
"""

import pytest
from pydantic import ValidationError

from bedrock_agents.config import ReadinessSettings, Settings


def test_readiness_defaults(settings):
    readiness = settings.readiness

    assert readiness.max_attempts == 30
    assert readiness.retry_delay == 10
    assert readiness.canary_document_id == "test-doc-id"
    assert readiness.vector_dimension == 1536
    assert readiness.service_name == "aoss"
    assert readiness.verify_certs is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("INDEX_READINESS_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("INDEX_READINESS_RETRY_DELAY", "2.5")
    monkeypatch.setenv("INDEX_READINESS_VERIFY_CERTS", "false")

    readiness = Settings().readiness

    assert readiness.max_attempts == 5
    assert readiness.retry_delay == 2.5
    assert readiness.verify_certs is False


def test_region_from_lambda_environment(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "eu-west-1")

    assert Settings().aws.region == "eu-west-1"


def test_invalid_attempts_rejected(monkeypatch):
    monkeypatch.setenv("INDEX_READINESS_MAX_ATTEMPTS", "0")

    with pytest.raises(ValidationError):
        ReadinessSettings()


def test_blank_canary_id_rejected(monkeypatch):
    monkeypatch.setenv("INDEX_READINESS_CANARY_DOCUMENT_ID", "  ")

    with pytest.raises(ValidationError):
        ReadinessSettings()


def test_is_production(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    assert Settings().is_production
