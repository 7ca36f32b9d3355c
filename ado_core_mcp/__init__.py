"""MCP server exposing Azure DevOps core tools (teams, projects, identities)."""
