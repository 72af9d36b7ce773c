"""
Command Line Interface for the Bedrock agents support code.

Provides commands for checking a vector index by hand and for browsing
the model registry.
"""

import argparse
import json
import sys

import structlog

from bedrock_agents.config import get_settings
from bedrock_agents.exceptions import BedrockAgentsError
from bedrock_agents.logging_config import configure_logging
from bedrock_agents.models import ReadinessRequest
from bedrock_agents.readiness import ReadinessPoller
from bedrock_agents.registry import ModelProvider, ModelRegistry, ModelType, default_registry
from bedrock_agents.services.search_index import SearchIndexClient

logger = structlog.get_logger(__name__)


def check_index(
    endpoint: str,
    index_name: str,
    max_attempts: int | None = None,
    retry_delay: float | None = None,
) -> int:
    """Run the readiness check against an index and return an exit code."""
    settings = get_settings()
    defaults = settings.readiness

    request = ReadinessRequest(
        endpoint=endpoint,
        index_name=index_name,
        max_attempts=max_attempts or defaults.max_attempts,
        retry_delay=defaults.retry_delay if retry_delay is None else retry_delay,
        vector_dimension=defaults.vector_dimension,
    )
    poller = ReadinessPoller(
        SearchIndexClient(request.endpoint, settings=settings),
        canary_id=defaults.canary_document_id,
    )

    try:
        outcome = poller.check(request)
    except BedrockAgentsError as e:
        logger.error("Readiness check aborted", error=str(e))
        return 2

    if outcome.is_ready:
        print(f"✅ {request.index_name} is ready ({outcome.attempts} attempt(s))")
        return 0
    print(f"❌ {request.index_name}: {outcome.reason} ({outcome.attempts} attempt(s))")
    return 1


def list_models(
    registry: ModelRegistry,
    model_type: str | None = None,
    provider: str | None = None,
    as_json: bool = False,
) -> None:
    """Print registry entries, optionally filtered."""
    models = registry.by_type(ModelType(model_type)) if model_type else dict(registry.models)
    if provider:
        models = {k: m for k, m in models.items() if m.provider == ModelProvider(provider)}

    if as_json:
        print(json.dumps({k: m.model_dump(mode="json") for k, m in models.items()}, indent=2))
        return

    for key, model in models.items():
        print(f"{key:<20} {model.id:<45} {model.type.value:<10} {model.description}")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Bedrock agents CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check index command
    check_parser = subparsers.add_parser("check-index", help="Check that a vector index is ready")
    check_parser.add_argument("endpoint", help="Collection endpoint host")
    check_parser.add_argument("index", help="Index name")
    check_parser.add_argument("--max-attempts", type=int, help="Maximum probe cycles")
    check_parser.add_argument("--retry-delay", type=float, help="Seconds between probe cycles")

    # Models command
    models_parser = subparsers.add_parser("models", help="List registered Bedrock models")
    models_parser.add_argument("--type", choices=[t.value for t in ModelType], help="Filter by model type")
    models_parser.add_argument(
        "--provider",
        choices=[p.value for p in ModelProvider],
        help="Filter by provider",
    )
    models_parser.add_argument("--json", action="store_true", help="Output JSON")

    args = parser.parse_args(argv)

    settings = get_settings()
    # Production runs (CI pipelines, build hosts) ship logs to an aggregator
    configure_logging(
        args.log_level or settings.log_level,
        json_logs=settings.json_logs or settings.is_production,
    )

    if args.command == "check-index":
        sys.exit(check_index(args.endpoint, args.index, args.max_attempts, args.retry_delay))

    elif args.command == "models":
        list_models(default_registry(), args.type, args.provider, args.json)

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
