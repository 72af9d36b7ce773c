"""
AWS CDK Stack for the vector index readiness check.

Creates:
- Lambda function running the readiness handler
- IAM permissions for the OpenSearch Serverless data plane
- Custom resource that runs the check on every deployment

The Lambda's role must also be listed as a principal in the collection's
data access policy; its ARN is exported for that purpose.
"""

import time

from constructs import Construct
from aws_cdk import (
    Stack,
    Duration,
    BundlingOptions,
    CfnOutput,
    CustomResource,
    aws_iam as iam,
    aws_lambda as lambda_,
    aws_logs as logs,
)

from bedrock_agents.resources import (
    DEFAULT_VECTOR_INDEX_NAME,
    collection_arn,
    vector_index_name,
)


class IndexReadinessStack(Stack):
    """
    CDK Stack wiring the readiness handler as a custom resource.

    The function ARN is used directly as the service token, so the handler
    answers CloudFormation itself.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        collection_name: str,
        collection_endpoint: str,
        index_name: str = DEFAULT_VECTOR_INDEX_NAME,
        environment: str = "dev",
        max_attempts: int = 30,
        retry_delay: int = 10,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        prefix = f"bedrock-agents-{environment}"
        actual_index_name = vector_index_name(collection_name, index_name)

        self.readiness_function = lambda_.Function(
            self,
            "IndexReadinessFunction",
            function_name=f"{prefix}-index-readiness",
            description="Waits until a knowledge base vector index is healthy and writable",
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler="handler.handler",
            code=lambda_.Code.from_asset(
                "..",  # Project root (parent of infrastructure/)
                exclude=[
                    "cdk.out",
                    "infrastructure/cdk.out",
                    ".venv",
                    "venv",
                    ".git",
                    "__pycache__",
                    "*.pyc",
                    ".pytest_cache",
                    "tests",
                    ".env",
                    "*.egg-info",
                ],
                bundling=BundlingOptions(
                    image=lambda_.Runtime.PYTHON_3_12.bundling_image,
                    command=[
                        "bash",
                        "-c",
                        "pip install . -t /asset-output && cp infrastructure/lambda/handler.py /asset-output/",
                    ],
                ),
            ),
            # Must outlast max_attempts * retry_delay plus the response margin
            timeout=Duration.minutes(10),
            memory_size=256,
            environment={
                "LOG_LEVEL": "INFO",
                "INDEX_READINESS_MAX_ATTEMPTS": str(max_attempts),
                "INDEX_READINESS_RETRY_DELAY": str(retry_delay),
            },
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        self.readiness_function.add_to_role_policy(
            iam.PolicyStatement(
                sid="OpenSearchServerlessDataAccess",
                effect=iam.Effect.ALLOW,
                actions=["aoss:APIAccessAll"],
                resources=[collection_arn(self.region, self.account, collection_name)],
            )
        )

        self.readiness_check = CustomResource(
            self,
            "IndexReadinessCheck",
            service_token=self.readiness_function.function_arn,
            resource_type="Custom::IndexReadiness",
            properties={
                "endpoint": collection_endpoint,
                "indexName": actual_index_name,
                # Changes on every synth so the check reruns on each deployment
                "timestamp": str(int(time.time() * 1000)),
            },
        )

        # Outputs
        CfnOutput(
            self,
            "VectorIndexName",
            value=actual_index_name,
            description="Vector index verified by the readiness check",
            export_name=f"{prefix}-vector-index-name",
        )

        CfnOutput(
            self,
            "ReadinessRoleArn",
            value=self.readiness_function.role.role_arn,
            description="Role to add to the collection data access policy",
            export_name=f"{prefix}-readiness-role-arn",
        )
