"""
Lambda handlers deployed alongside the Bedrock agents.
"""

from bedrock_agents.handlers.index_readiness import IndexReadinessHandler, handler

__all__ = ["IndexReadinessHandler", "handler"]
