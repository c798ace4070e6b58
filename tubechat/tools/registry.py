from typing import Any, Awaitable, Callable

from tubechat.errors import UnknownTool
from tubechat.models import ToolDeclaration
from tubechat.tools.youtube_search import YOUTUBE_SEARCH, make_youtube_search
from tubechat.youtube_client import YouTubeSearch

ToolHandler = Callable[..., Awaitable[Any]]


class ToolRegistry:
    """Maps tool names to their declaration and async handler, in registration order."""

    def __init__(self) -> None:
        self._tools: dict[str, tuple[ToolDeclaration, ToolHandler]] = {}

    def register(self, declaration: ToolDeclaration, handler: ToolHandler) -> None:
        if declaration.name in self._tools:
            raise ValueError(f"Tool '{declaration.name}' is already registered.")
        self._tools[declaration.name] = (declaration, handler)

    def list_declarations(self) -> list[ToolDeclaration]:
        return [decl for decl, _ in self._tools.values()]

    def get_declaration(self, name: str) -> ToolDeclaration:
        entry = self._tools.get(name)
        if entry is None:
            raise UnknownTool(name)
        return entry[0]

    def get_handler(self, name: str) -> ToolHandler:
        entry = self._tools.get(name)
        if entry is None:
            raise UnknownTool(name)
        return entry[1]

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __repr__(self) -> str:
        return f"<ToolRegistry tools={list(self._tools)}>"


def build_registry(search: YouTubeSearch) -> ToolRegistry:
    """Registry holding the default catalog, backed by a ``YouTubeSearch``."""
    registry = ToolRegistry()
    registry.register(YOUTUBE_SEARCH, make_youtube_search(search))
    return registry
