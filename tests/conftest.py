from unittest.mock import AsyncMock, MagicMock

import pytest

from tubechat.youtube_client import YouTubeSearch

from helpers import make_video


@pytest.fixture
def search() -> MagicMock:
    """YouTubeSearch stand-in whose ``search`` returns three videos."""
    stub = MagicMock(spec=YouTubeSearch)
    stub.search = AsyncMock(return_value=[make_video(1), make_video(2), make_video(3)])
    return stub


@pytest.fixture
def completions() -> MagicMock:
    stub = MagicMock()
    stub.complete = AsyncMock()
    return stub
