"""
Search index client for OpenSearch Serverless vector collections.

Wraps opensearch-py with SigV4 request signing and exposes only the
operations the readiness check needs.
"""

from typing import Any

import boto3
import structlog
from opensearchpy import OpenSearch, RequestsHttpConnection
from opensearchpy.exceptions import OpenSearchException
from requests_aws4auth import AWS4Auth

from bedrock_agents.config import Settings, get_settings
from bedrock_agents.exceptions import ConfigurationError, SearchIndexError
from bedrock_agents.models import HealthStatus

logger = structlog.get_logger(__name__)


class SearchIndexClient:
    """
    Client for a single search endpoint.

    The underlying OpenSearch client is created on first use so that
    building the object never touches the network or the credential chain.
    """

    def __init__(
        self,
        endpoint: str,
        settings: Settings | None = None,
        client: OpenSearch | None = None,
    ):
        """Initialize the client for ``endpoint`` (host name, no scheme)."""
        self.endpoint = endpoint
        self.settings = settings or get_settings()
        self._client = client

    def _get_boto_kwargs(self) -> dict:
        """Get boto3 session kwargs, only including credentials if explicitly set."""
        kwargs = {"region_name": self.settings.aws.region}
        if self.settings.aws.access_key_id and self.settings.aws.secret_access_key:
            kwargs["aws_access_key_id"] = self.settings.aws.access_key_id
            kwargs["aws_secret_access_key"] = self.settings.aws.secret_access_key
        return kwargs

    def _build_auth(self) -> AWS4Auth:
        session = boto3.Session(**self._get_boto_kwargs())
        credentials = session.get_credentials()
        if credentials is None:
            raise ConfigurationError("No AWS credentials available to sign search requests")
        frozen = credentials.get_frozen_credentials()
        return AWS4Auth(
            frozen.access_key,
            frozen.secret_key,
            self.settings.aws.region,
            self.settings.readiness.service_name,
            session_token=frozen.token,
        )

    @property
    def client(self) -> OpenSearch:
        """Lazy initialization of the OpenSearch client."""
        if self._client is None:
            readiness = self.settings.readiness
            if not readiness.verify_certs:
                logger.warning(
                    "TLS certificate verification disabled for search endpoint",
                    endpoint=self.endpoint,
                )
            self._client = OpenSearch(
                hosts=[{"host": self.endpoint, "port": 443}],
                http_auth=self._build_auth(),
                use_ssl=True,
                verify_certs=readiness.verify_certs,
                ssl_show_warn=readiness.verify_certs,
                connection_class=RequestsHttpConnection,
                timeout=readiness.request_timeout,
                # The readiness poller owns retries; one call is one request
                max_retries=0,
                retry_on_timeout=False,
            )
        return self._client

    def health(self, index_name: str) -> HealthStatus:
        """
        Get the health of an index.

        Args:
            index_name: Index to check

        Returns:
            Health status; unknown when the response carries no usable status

        Raises:
            SearchIndexError: If the request fails
        """
        try:
            response = self.client.cluster.health(index=index_name)
        except OpenSearchException as e:
            raise SearchIndexError(f"Health check failed for {index_name}: {e}") from e

        if not isinstance(response, dict):
            raise SearchIndexError(f"Malformed health response for {index_name}")

        status = HealthStatus.from_response(response.get("status"))
        logger.debug("Index health", index_name=index_name, status=status.value)
        return status

    def put_document(self, index_name: str, document_id: str, body: dict[str, Any]) -> dict[str, Any]:
        """
        Create or overwrite a document by id.

        Raises:
            SearchIndexError: If the write is rejected
        """
        try:
            return self.client.index(index=index_name, id=document_id, body=body)
        except OpenSearchException as e:
            raise SearchIndexError(f"Failed to write {document_id} to {index_name}: {e}") from e

    def delete_document(self, index_name: str, document_id: str) -> dict[str, Any]:
        """
        Delete a document by id.

        Raises:
            SearchIndexError: If the delete fails
        """
        try:
            return self.client.delete(index=index_name, id=document_id)
        except OpenSearchException as e:
            raise SearchIndexError(f"Failed to delete {document_id} from {index_name}: {e}") from e
