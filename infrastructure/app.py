#!/usr/bin/env python3
"""
CDK Application entry point.

Deploy with:
    cdk deploy -c collection_name=<name> -c collection_endpoint=<host>
"""

import os

import aws_cdk as cdk

from stack import IndexReadinessStack


def main():
    """Create and configure the CDK app."""
    app = cdk.App()

    # Get environment from context or default to 'dev'
    environment = app.node.try_get_context("environment") or "dev"

    collection_name = app.node.try_get_context("collection_name")
    collection_endpoint = app.node.try_get_context("collection_endpoint")
    if not collection_name or not collection_endpoint:
        raise ValueError("Context values collection_name and collection_endpoint are required")

    # Configure AWS environment
    env = cdk.Environment(
        account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
        region=os.environ.get("CDK_DEFAULT_REGION", "us-east-1"),
    )

    IndexReadinessStack(
        app,
        f"IndexReadinessStack-{environment}",
        collection_name=collection_name,
        collection_endpoint=collection_endpoint,
        index_name=app.node.try_get_context("index_name") or "vector-index",
        environment=environment,
        env=env,
        description=f"Knowledge base index readiness check ({environment})",
    )

    # Add tags to all resources
    cdk.Tags.of(app).add("Project", "BedrockAgents")
    cdk.Tags.of(app).add("Environment", environment)
    cdk.Tags.of(app).add("ManagedBy", "CDK")

    app.synth()


if __name__ == "__main__":
    main()
