"""Auto-import all tool modules to register them."""
# Import all tool modules - they will auto-register with the global mcp instance
from . import core  # noqa: F401
