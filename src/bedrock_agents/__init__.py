"""
Bedrock Agents - support code for multi-agent Bedrock deployments.

Provides the custom-resource handler that verifies knowledge base vector
indexes are ready, the Bedrock model registry, and resource naming helpers.
"""

__version__ = "0.1.0"

from bedrock_agents.config import Settings
from bedrock_agents.readiness import ReadinessPoller
from bedrock_agents.registry import ModelRegistry, default_registry

__all__ = ["Settings", "ReadinessPoller", "ModelRegistry", "default_registry", "__version__"]
