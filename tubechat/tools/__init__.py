from tubechat.tools.registry import ToolRegistry, build_registry
from tubechat.tools.executor import ToolExecutor
from tubechat.tools.youtube_search import SEARCH_TOOL, YOUTUBE_SEARCH

__all__ = ["ToolRegistry", "build_registry", "ToolExecutor", "SEARCH_TOOL", "YOUTUBE_SEARCH"]
