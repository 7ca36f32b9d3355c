"""Core-area MCP tools: teams, projects and identities."""
import json
import logging
from typing import Annotated, Awaitable, Callable, Literal, Optional, get_args

import httpx
from fastmcp.exceptions import ToolError
from pydantic import Field

from .. import config
from ..config import mcp
from ..client import AccessToken, AzureDevOpsClientError, Connection, get_access_token, get_connection
from ..utils.helpers import filter_projects_by_name, org_name_from_url, pagination_note, trim_identity
from ..utils.results import Empty, Ok, ToolOutcome, tool_operation

logger = logging.getLogger(__name__)

CORE_TOOLS = {
    "list_project_teams": "core_list_project_teams",
    "list_projects": "core_list_projects",
    "get_identity_ids": "core_get_identity_ids",
}

ProjectState = Literal["all", "wellFormed", "createPending", "deleted"]
PROJECT_STATES = get_args(ProjectState)

IDENTITIES_URL = "https://vssps.dev.azure.com/{org}/_apis/identities"

ConnectionProvider = Callable[[], Awaitable[Connection]]
TokenProvider = Callable[[], Awaitable[AccessToken]]


@tool_operation("fetching project teams")
async def list_project_teams(
        connection_provider: ConnectionProvider,
        project: str,
        mine: Optional[bool] = None,
        top: Optional[int] = None,
        skip: Optional[int] = None,
) -> ToolOutcome:
    """List the teams of a project and append a note on how to page further."""
    connection = await connection_provider()
    core_api = connection.get_core_api()
    teams = await core_api.get_teams(project, mine, top, skip, False)

    if teams is None:
        return Empty("No teams found")

    logger.info("Fetched %d teams for project %s", len(teams), project)
    return Ok(json.dumps(teams, indent=2) + pagination_note(len(teams), top, skip))


@tool_operation("fetching projects")
async def list_projects(
        connection_provider: ConnectionProvider,
        state_filter: ProjectState = "wellFormed",
        top: Optional[int] = None,
        skip: Optional[int] = None,
        continuation_token: Optional[int] = None,
        project_name_filter: Optional[str] = None,
) -> ToolOutcome:
    """List projects in the organization, optionally narrowed by name."""
    if state_filter not in PROJECT_STATES:
        raise ValueError(f"Invalid state filter '{state_filter}'; expected one of {', '.join(PROJECT_STATES)}")

    connection = await connection_provider()
    core_api = connection.get_core_api()
    projects = await core_api.get_projects(state_filter, top, skip, continuation_token, False)

    if projects is None:
        return Empty("No projects found")

    if project_name_filter:
        projects = filter_projects_by_name(projects, project_name_filter)

    logger.info("Fetched %d projects (state=%s)", len(projects), state_filter)
    return Ok(json.dumps(projects, indent=2))


@tool_operation("fetching identities")
async def get_identity_ids(
        token_provider: TokenProvider,
        connection_provider: ConnectionProvider,
        search_filter: str,
        client: Optional[httpx.AsyncClient] = None,
) -> ToolOutcome:
    """
    Resolve identity IDs by calling the identities REST endpoint directly.

    The connection is only used to find the organization name; the call itself
    goes to vssps.dev.azure.com with the bearer token.

    Args:
        token_provider: Async factory for the bearer credential
        connection_provider: Async factory for the organization connection
        search_filter: Unique name, display name or email to look for
        client: Optional httpx client to send the request with (left open)
    """
    token = await token_provider()
    connection = await connection_provider()
    org_name = org_name_from_url(connection.server_url)

    url = IDENTITIES_URL.format(org=org_name)
    params = {
        "api-version": config.ADO_IDENTITY_API_VERSION,
        "searchFilter": "General",
        "filterValue": search_filter,
    }
    headers = {
        "Authorization": f"Bearer {token.token}",
        "Content-Type": "application/json",
    }

    if client is None:
        async with httpx.AsyncClient() as own_client:
            resp = await own_client.get(url, params=params, headers=headers)
    else:
        resp = await client.get(url, params=params, headers=headers)

    if not resp.is_success:
        raise AzureDevOpsClientError(f"HTTP {resp.status_code}: {resp.text}")

    identities = resp.json()
    if not identities or not identities.get("value"):
        return Empty("No identities found")

    trimmed = [trim_identity(identity) for identity in identities["value"]]
    return Ok(json.dumps(trimmed, indent=2))


def _to_tool_result(response: dict) -> str:
    """Hand a response to FastMCP: text on success, ToolError (isError) otherwise."""
    text = response["content"][0]["text"]
    if response.get("isError"):
        raise ToolError(text)
    return text


@mcp.tool(
    name=CORE_TOOLS["list_project_teams"],
    description=(
        "Retrieve a list of teams for the specified Azure DevOps project. Use pagination (top/skip) "
        "for large projects. The Azure DevOps API may limit results to ~720 teams even with higher "
        "'top' values - use 'skip' to get additional teams."
    ),
)
async def core_list_project_teams(
        project: Annotated[str, Field(description="The name or ID of the Azure DevOps project.")],
        mine: Annotated[Optional[bool], Field(
            description="If true, only return teams that the authenticated user is a member of.")] = None,
        top: Annotated[Optional[int], Field(
            description="The maximum number of teams to return. Defaults to 100. Note: Azure DevOps API "
                        "may limit actual results to ~720 regardless of this value.")] = None,
        skip: Annotated[Optional[int], Field(
            description="The number of teams to skip for pagination. Use this to get teams beyond the "
                        "API limit (e.g., skip=720 to get teams 721+).")] = None,
) -> str:
    response = await list_project_teams(get_connection, project, mine=mine, top=top, skip=skip)
    return _to_tool_result(response)


@mcp.tool(
    name=CORE_TOOLS["list_projects"],
    description="Retrieve a list of projects in your Azure DevOps organization.",
)
async def core_list_projects(
        stateFilter: Annotated[ProjectState, Field(
            description="Filter projects by their state. Defaults to 'wellFormed'.")] = "wellFormed",
        top: Annotated[Optional[int], Field(
            description="The maximum number of projects to return. Defaults to 100.")] = None,
        skip: Annotated[Optional[int], Field(
            description="The number of projects to skip for pagination. Defaults to 0.")] = None,
        continuationToken: Annotated[Optional[int], Field(
            description="Continuation token for pagination. Used to fetch the next set of results "
                        "if available.")] = None,
        projectNameFilter: Annotated[Optional[str], Field(
            description="Filter projects by name. Supports partial matches.")] = None,
) -> str:
    response = await list_projects(
        get_connection,
        state_filter=stateFilter,
        top=top,
        skip=skip,
        continuation_token=continuationToken,
        project_name_filter=projectNameFilter,
    )
    return _to_tool_result(response)


@mcp.tool(
    name=CORE_TOOLS["get_identity_ids"],
    description="Retrieve Azure DevOps identity IDs for a provided search filter.",
)
async def core_get_identity_ids(
        searchFilter: Annotated[str, Field(
            description="Search filter (unique name, display name, email) to retrieve identity IDs for.")],
) -> str:
    response = await get_identity_ids(get_access_token, get_connection, searchFilter)
    return _to_tool_result(response)
