"""
Services module for the Bedrock agents support code.

Contains the AWS-facing integrations used by the Lambda handlers.
"""

from bedrock_agents.services.cfn_response import ResponseSender, build_response
from bedrock_agents.services.search_index import SearchIndexClient

__all__ = [
    "ResponseSender",
    "SearchIndexClient",
    "build_response",
]
