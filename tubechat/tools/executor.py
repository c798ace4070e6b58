"""
Tool execution: validates model-supplied arguments against the tool's declared
parameters, then dispatches to the registered handler.

Caller-side problems (unknown tool, bad arguments) come back as an error-marker
``ToolResult`` so the conversation can continue. Provider failures raised by a
handler are not caught here.
"""

import logging
from typing import Any

from tubechat.errors import InvalidArgument, UnknownTool
from tubechat.models import ToolCallRequest, ToolDeclaration, ToolResult
from tubechat.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "array": (list,),
    "object": (dict,),
}


def _matches_type(value: Any, json_type: str) -> bool:
    expected = _JSON_TYPES.get(json_type)
    if expected is None:
        return True
    if isinstance(value, bool) and json_type != "boolean":
        return False
    return isinstance(value, expected)


def validate_arguments(declaration: ToolDeclaration, arguments: Any) -> dict[str, Any]:
    """Check *arguments* against *declaration* and return them with defaults applied."""
    if not isinstance(arguments, dict):
        raise InvalidArgument(f"Arguments for '{declaration.name}' must be a JSON object")

    known = {p.name for p in declaration.parameters}
    unexpected = sorted(set(arguments) - known)
    if unexpected:
        raise InvalidArgument(
            f"Unexpected argument(s) for '{declaration.name}': {', '.join(unexpected)}"
        )

    validated: dict[str, Any] = {}
    for param in declaration.parameters:
        if param.name not in arguments:
            if param.required:
                raise InvalidArgument(
                    f"Missing required argument '{param.name}' for '{declaration.name}'"
                )
            if param.default is not None:
                validated[param.name] = param.default
            continue
        value = arguments[param.name]
        if not _matches_type(value, param.type):
            raise InvalidArgument(
                f"Argument '{param.name}' for '{declaration.name}' must be of type {param.type}, "
                f"got {type(value).__name__}"
            )
        validated[param.name] = value
    return validated


class ToolExecutor:
    def __init__(self, registry: ToolRegistry):
        self._registry = registry

    async def execute(self, call: ToolCallRequest) -> ToolResult:
        try:
            declaration = self._registry.get_declaration(call.name)
            handler = self._registry.get_handler(call.name)
        except UnknownTool as e:
            logger.warning("Unknown tool called: %s", call.name)
            return ToolResult.error(call.id, call.name, str(e))

        try:
            kwargs = validate_arguments(declaration, call.arguments)
            output = await handler(**kwargs)
        except InvalidArgument as e:
            logger.warning("Tool %s rejected its arguments: %s", call.name, e)
            return ToolResult.error(call.id, call.name, str(e))

        logger.debug("Tool %s completed", call.name)
        return ToolResult(tool_call_id=call.id, name=call.name, payload=output)
