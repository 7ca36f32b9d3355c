"""Helper functions for Azure DevOps operations."""
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

DEFAULT_TOP = 100


def org_name_from_url(server_url: str) -> str:
    """
    Get the organization name out of an organization URL.

    https://dev.azure.com/myorg -> "myorg" (the fourth "/"-separated segment).
    Legacy https://myorg.visualstudio.com URLs resolve to the first host label.
    Anything else raises ValueError instead of guessing.
    """
    parsed = urlsplit(server_url or "")
    host = parsed.hostname or ""
    if parsed.scheme not in ("http", "https") or not host:
        raise ValueError(f"Cannot determine organization name from server URL '{server_url}'")

    if host.endswith(".visualstudio.com"):
        return host.split(".")[0]

    segments = server_url.split("/")
    if len(segments) > 3 and segments[3]:
        return segments[3]

    raise ValueError(f"Cannot determine organization name from server URL '{server_url}'")


def filter_projects_by_name(projects: List[Dict[str, Any]], project_name_filter: str) -> List[Dict[str, Any]]:
    """Keep the projects whose name contains the filter, ignoring case. Unnamed projects never match."""
    needle = project_name_filter.casefold()
    return [p for p in projects if p.get("name") and needle in p["name"].casefold()]


def pagination_note(result_count: int, top: Optional[int], skip: Optional[int]) -> str:
    """Describe where a page of teams sits in the full listing."""
    actual_top = top or DEFAULT_TOP
    actual_skip = skip or 0

    note = f"\nPagination info: Returned {result_count} teams"
    if actual_skip > 0:
        note += f" (skipped first {actual_skip})"

    if result_count == actual_top:
        note += f". There may be more teams - use 'skip={actual_skip + result_count}' to get the next batch."
    elif result_count < actual_top and actual_skip == 0:
        note += " (all teams in project)."
    else:
        note += "."

    return note


def trim_identity(identity: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce an identity to the fields callers need to reference it."""
    return {
        "id": identity.get("id"),
        "displayName": identity.get("providerDisplayName"),
        "descriptor": identity.get("descriptor"),
    }
