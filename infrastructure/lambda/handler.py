"""
AWS Lambda entry point for the index readiness custom resource.

The bedrock_agents package is installed next to this file when the asset
is bundled.
"""

from bedrock_agents.handlers.index_readiness import handler

__all__ = ["handler"]
