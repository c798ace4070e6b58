import logging

from tubechat.models import ToolDeclaration, ToolParameter, VideoRecord
from tubechat.youtube_client import DEFAULT_MAX_RESULTS, YouTubeSearch

logger = logging.getLogger(__name__)

SEARCH_TOOL = "youtube_search"

YOUTUBE_SEARCH = ToolDeclaration(
    name=SEARCH_TOOL,
    description=(
        "Search YouTube for videos. "
        "Use this when the user asks for video recommendations or wants to find videos on a topic."
    ),
    parameters=(
        ToolParameter(
            name="query",
            type="string",
            description="Search keywords, e.g. 'kubernetes tutorial'",
            required=True,
        ),
        ToolParameter(
            name="maxResults",
            type="integer",
            description="Maximum number of videos to return",
            default=DEFAULT_MAX_RESULTS,
        ),
    ),
)


def make_youtube_search(search: YouTubeSearch):
    async def youtube_search(query: str, maxResults: int = DEFAULT_MAX_RESULTS) -> list[VideoRecord]:
        """Search YouTube and return up to ``maxResults`` videos."""
        return await search.search(query, maxResults)

    return youtube_search
