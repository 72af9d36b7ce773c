"""
AWS CDK Infrastructure for the Bedrock agents support code.

Packages and deploys the vector index readiness check as a custom
resource backed by a Lambda function.
"""
