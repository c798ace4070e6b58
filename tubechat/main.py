import asyncio
import logging
import sys

from tubechat.agent import Agent
from tubechat.config import Settings
from tubechat.openai_client import CompletionClient
from tubechat.server import Gateway, serve_forever
from tubechat.tools import build_registry
from tubechat.youtube_client import YouTubeAccount, YouTubeSearch

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


async def main() -> None:
    settings = Settings.from_env()
    logger.info(
        "Starting tubechat | model=%s account=%s",
        settings.openai_model,
        "configured" if settings.has_account_credentials else "not configured",
    )

    completions = CompletionClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.request_timeout,
    )
    search = YouTubeSearch(settings.youtube_api_key, timeout=settings.request_timeout)
    account = YouTubeAccount(
        client_id=settings.youtube_client_id,
        client_secret=settings.youtube_client_secret,
        refresh_token=settings.youtube_refresh_token,
        timeout=settings.request_timeout,
    )
    agent = Agent(completions=completions, registry=build_registry(search))
    gateway = Gateway(agent=agent, account=account)

    try:
        await serve_forever(gateway, settings.host, settings.port, settings.allowed_origins)
    finally:
        await completions.aclose()
        await search.aclose()
        await account.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
