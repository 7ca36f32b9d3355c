"""Configuration management for Azure DevOps core MCP server."""
import logging
import os
from dotenv import load_dotenv
from fastmcp import FastMCP

load_dotenv()

logger = logging.getLogger(__name__)

# Global MCP instance - accessible everywhere
mcp = FastMCP("azure-devops-core")

# Azure DevOps configuration
ADO_ORG_URL = os.getenv("ADO_ORG_URL")  # e.g. https://dev.azure.com/myorg
ADO_PAT = os.getenv("ADO_PAT")  # PAT with Project and Team (Read) scope
ADO_ACCESS_TOKEN = os.getenv("ADO_ACCESS_TOKEN")  # Entra bearer token, used for identities

ADO_API_VERSION = os.getenv("ADO_API_VERSION", "7.1")
ADO_IDENTITY_API_VERSION = os.getenv("ADO_IDENTITY_API_VERSION", "7.2-preview.1")

# Server settings
ADO_MCP_TRANSPORT = os.getenv("ADO_MCP_TRANSPORT", "stdio")
ADO_MCP_HOST = os.getenv("ADO_MCP_HOST", "127.0.0.1")
ADO_MCP_PORT = os.getenv("ADO_MCP_PORT", "8000")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def mcp_port() -> int:
    """Port for the streamable-http transport."""
    try:
        return int(ADO_MCP_PORT)
    except ValueError:
        raise SystemExit(f"ADO_MCP_PORT must be an integer, got {ADO_MCP_PORT!r}")


def check_settings() -> None:
    """Abort startup when the server cannot reach Azure DevOps."""
    if not ADO_ORG_URL or not (ADO_PAT or ADO_ACCESS_TOKEN):
        raise SystemExit("Missing env vars: ADO_ORG_URL / ADO_PAT or ADO_ACCESS_TOKEN")
    if ADO_MCP_TRANSPORT not in ("stdio", "streamable-http"):
        raise SystemExit(f"Unsupported ADO_MCP_TRANSPORT: {ADO_MCP_TRANSPORT}")
    mcp_port()

    if not ADO_ACCESS_TOKEN:
        logger.warning("ADO_ACCESS_TOKEN is not set; core_get_identity_ids will fail until it is configured.")
