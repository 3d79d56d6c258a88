"""
MS Graph client setup with lazy initialization.
"""

from azure.identity import ClientSecretCredential
from msgraph import GraphServiceClient

from core.config import GRAPH_APP_ID, GRAPH_CLIENT_SECRET, GRAPH_TENANT_ID
from core.errors import CredentialError

GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]

_graph_client: GraphServiceClient | None = None
_credential: ClientSecretCredential | None = None


def get_graph_client() -> GraphServiceClient:
    """Get or create the MS Graph client (lazy initialization)."""
    global _graph_client, _credential
    if _graph_client is None:
        if not (GRAPH_TENANT_ID and GRAPH_APP_ID and GRAPH_CLIENT_SECRET):
            raise CredentialError("MS Graph tenant, app id and client secret must all be set")
        _credential = ClientSecretCredential(
            tenant_id=GRAPH_TENANT_ID,
            client_id=GRAPH_APP_ID,
            client_secret=GRAPH_CLIENT_SECRET,
        )
        _graph_client = GraphServiceClient(credentials=_credential, scopes=GRAPH_SCOPES)
    return _graph_client


def close_graph_client() -> None:
    """Release the credential's HTTP session, if a client was created."""
    global _graph_client, _credential
    if _credential is not None:
        _credential.close()
    _graph_client = None
    _credential = None
