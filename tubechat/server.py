"""
WebSocket gateway.

Clients send one JSON object per text frame and get one JSON object back:

    {"id": 1, "action": "chat", "message": "recommend videos about Kubernetes"}
    {"id": 1, "status": 200, "reply": "...", "videos": [...]}

Actions: ``chat`` (default), ``liked``, ``history``, ``like``, ``unlike``.
Failures reply ``{"error": ..., "status": ...}`` and leave the connection open.
A plain ``GET /health`` is answered over HTTP without upgrading.
"""

import json
import logging
from http import HTTPStatus
from typing import Any, Awaitable, Callable, Optional

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from tubechat.agent import Agent
from tubechat.errors import ChatError, InvalidArgument, ProviderError
from tubechat.youtube_client import YouTubeAccount

logger = logging.getLogger(__name__)

SERVICE_NAME = "tubechat"

_FAILURE_MESSAGES = {
    "chat": "Chat processing error",
    "liked": "Failed to fetch liked videos",
    "history": "Failed to fetch watch history",
    "like": "Failed to like video",
    "unlike": "Failed to unlike video",
}


def _error(message: str, status: HTTPStatus) -> dict[str, Any]:
    return {"error": message, "status": int(status)}


class Gateway:
    def __init__(self, agent: Agent, account: YouTubeAccount):
        self._agent = agent
        self._account = account
        self._actions: dict[str, Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]] = {
            "chat": self._chat,
            "liked": self._liked,
            "history": self._history,
            "like": self._like,
            "unlike": self._unlike,
        }

    async def _chat(self, request: dict[str, Any]) -> dict[str, Any]:
        result = await self._agent.chat(request.get("message"))
        return result.to_dict()

    async def _liked(self, request: dict[str, Any]) -> dict[str, Any]:
        videos = await self._account.liked()
        return {"liked": [v.to_dict() for v in videos]}

    async def _history(self, request: dict[str, Any]) -> dict[str, Any]:
        videos = await self._account.history()
        return {"history": [v.to_dict() for v in videos]}

    async def _like(self, request: dict[str, Any]) -> dict[str, Any]:
        await self._account.like(request.get("videoId"))
        return {"success": True, "message": "Video liked successfully!"}

    async def _unlike(self, request: dict[str, Any]) -> dict[str, Any]:
        await self._account.unlike(request.get("videoId"))
        return {"success": True, "message": "Like removed successfully!"}

    async def dispatch(self, request: dict[str, Any]) -> dict[str, Any]:
        """Run one request object and return the reply object (never raises)."""
        action = request.get("action", "chat")
        handler = self._actions.get(action)
        if handler is None:
            return _error(f"Unknown action: {action}", HTTPStatus.BAD_REQUEST)

        try:
            reply = await handler(request)
        except InvalidArgument as e:
            return _error(str(e), HTTPStatus.BAD_REQUEST)
        except (ChatError, ProviderError) as e:
            logger.error("%s failed: %s", action, e)
            return _error(_FAILURE_MESSAGES[action], HTTPStatus.INTERNAL_SERVER_ERROR)
        except Exception:
            logger.exception("Unhandled error in %s", action)
            return _error(_FAILURE_MESSAGES[action], HTTPStatus.INTERNAL_SERVER_ERROR)

        reply["status"] = int(HTTPStatus.OK)
        return reply

    async def handle_frame(self, raw: str | bytes) -> dict[str, Any]:
        try:
            request = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Non-JSON frame received (%d bytes)", len(raw))
            return _error("Request must be a JSON object", HTTPStatus.BAD_REQUEST)
        if not isinstance(request, dict):
            return _error("Request must be a JSON object", HTTPStatus.BAD_REQUEST)

        reply = await self.dispatch(request)
        if "id" in request:
            reply["id"] = request["id"]
        return reply

    async def handler(self, websocket: ServerConnection) -> None:
        logger.info("Client connected: %s", websocket.remote_address)
        try:
            async for raw in websocket:
                reply = await self.handle_frame(raw)
                await websocket.send(json.dumps(reply, ensure_ascii=False))
        except ConnectionClosed:
            pass
        logger.info("Client disconnected: %s", websocket.remote_address)


def health_check(connection: ServerConnection, request: Request) -> Optional[Response]:
    """Answer ``GET /health`` over plain HTTP; let everything else upgrade."""
    if request.path.split("?")[0] != "/health":
        return None
    body = json.dumps({"status": "ok", "service": SERVICE_NAME})
    return connection.respond(HTTPStatus.OK, body + "\n")


async def serve_forever(gateway: Gateway, host: str, port: int, origins: frozenset[str] = frozenset()) -> None:
    async with serve(
        gateway.handler,
        host,
        port,
        process_request=health_check,
        origins=sorted(origins) or None,
    ) as server:
        logger.info("tubechat gateway listening on ws://%s:%d", host, port)
        await server.serve_forever()
