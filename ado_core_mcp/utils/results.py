"""Tool outcomes and the shared response wrapper for MCP tools."""
import functools
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Union

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"

ToolResponse = Dict[str, Any]


@dataclass
class Ok:
    text: str


@dataclass
class Empty:
    """The call succeeded but returned nothing worth showing; reported as an error."""
    reason: str


@dataclass
class Failed:
    reason: str


ToolOutcome = Union[Ok, Empty, Failed]


def error_message(error: BaseException) -> str:
    """Message carried by an exception, or a generic fallback."""
    return str(error) or UNKNOWN_ERROR


def to_response(outcome: ToolOutcome) -> ToolResponse:
    """Collapse an outcome into the MCP text-content response shape."""
    if isinstance(outcome, (Empty, Failed)):
        return {"content": [{"type": "text", "text": outcome.reason}], "isError": True}
    return {"content": [{"type": "text", "text": outcome.text}]}


def as_outcome(value: Any) -> ToolOutcome:
    """Treat anything that is not already an outcome as successful data."""
    if isinstance(value, (Ok, Empty, Failed)):
        return value
    if isinstance(value, str):
        return Ok(value)
    return Ok(json.dumps(value, indent=2))


def tool_operation(description: str) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[ToolResponse]]]:
    """
    Run a tool body and turn whatever happens into a tool response.

    The wrapped coroutine returns a ToolOutcome; a plain string counts as Ok
    and any other value is sent as indented JSON.
    Any exception becomes Failed("Error <description>: <message>"), so the
    wrapper itself never raises.

    Args:
        description: Operation wording used in error messages, e.g. "fetching projects"
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> ToolResponse:
            try:
                outcome = as_outcome(await func(*args, **kwargs))
            except Exception as e:
                logger.exception("Error %s", description)
                outcome = Failed(f"Error {description}: {error_message(e)}")

            if isinstance(outcome, Empty):
                logger.warning("%s: %s", func.__name__, outcome.reason)

            return to_response(outcome)

        return wrapper

    return decorator
