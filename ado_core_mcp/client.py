"""HTTP client for Azure DevOps API."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from . import config

logger = logging.getLogger(__name__)


class AzureDevOpsClientError(Exception):
    """Exception raised for errors in Azure DevOps client operations."""
    pass


@dataclass
class AccessToken:
    """Bearer credential handed out by the token provider."""
    token: str


class CoreClient:
    """Client for the Azure DevOps core area (projects and teams)."""

    def __init__(self, connection: "Connection"):
        self._connection = connection

    async def _get_list(self, path: str, params: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
        query = {k: v for k, v in params.items() if v is not None}
        query["api-version"] = self._connection.api_version
        url = f"{self._connection.server_url}/_apis/{path}"

        async with self._connection.http_client() as client:
            resp = await client.get(url, params=query)
            resp.raise_for_status()

        data = resp.json()
        if not data:
            return None
        return data.get("value")

    async def get_teams(
            self,
            project: str,
            mine: Optional[bool] = None,
            top: Optional[int] = None,
            skip: Optional[int] = None,
            expand_identity: Optional[bool] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """List the teams of a project. Returns None when the service sends no list."""
        logger.debug("GET teams for project %s (mine=%s top=%s skip=%s)", project, mine, top, skip)
        return await self._get_list(
            f"projects/{project}/teams",
            {"$mine": mine, "$top": top, "$skip": skip, "$expandIdentity": expand_identity},
        )

    async def get_projects(
            self,
            state_filter: Optional[str] = None,
            top: Optional[int] = None,
            skip: Optional[int] = None,
            continuation_token: Optional[int] = None,
            get_default_team_image_url: Optional[bool] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """List projects in the organization. Returns None when the service sends no list."""
        logger.debug("GET projects (state=%s top=%s skip=%s)", state_filter, top, skip)
        return await self._get_list(
            "projects",
            {
                "stateFilter": state_filter,
                "$top": top,
                "$skip": skip,
                "continuationToken": continuation_token,
                "getDefaultTeamImageUrl": get_default_team_image_url,
            },
        )


class Connection:
    """An authenticated handle on one Azure DevOps organization."""

    def __init__(
            self,
            server_url: str,
            auth: Optional[Any] = None,
            headers: Optional[Dict[str, str]] = None,
            api_version: str = config.ADO_API_VERSION,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_version = api_version
        self._auth = auth
        self._headers = headers or {}
        self._transport = transport

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(auth=self._auth, headers=self._headers, transport=self._transport)

    def get_core_api(self) -> CoreClient:
        return CoreClient(self)


async def get_access_token() -> AccessToken:
    """
    Token provider: return the bearer credential for raw REST calls.

    Raises:
        AzureDevOpsClientError: If no access token is configured
    """
    if not config.ADO_ACCESS_TOKEN:
        raise AzureDevOpsClientError("Azure DevOps access token not found in environment variables.")
    return AccessToken(token=config.ADO_ACCESS_TOKEN)


async def get_connection() -> Connection:
    """
    Connection provider: build a connection for the configured organization.

    A PAT is sent with basic auth; without one the bearer token is used.

    Raises:
        AzureDevOpsClientError: If the organization URL or credentials are missing
    """
    if not config.ADO_ORG_URL:
        raise AzureDevOpsClientError("Azure DevOps organization URL not found in environment variables.")

    if config.ADO_PAT:
        return Connection(config.ADO_ORG_URL, auth=("", config.ADO_PAT))

    token = await get_access_token()
    return Connection(config.ADO_ORG_URL, headers={"Authorization": f"Bearer {token.token}"})
