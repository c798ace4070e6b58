import json
import logging
from typing import Any, Optional, Sequence

import httpx

from tubechat.errors import UpstreamError
from tubechat.models import ConversationTurn, ToolCallRequest, ToolDeclaration

logger = logging.getLogger(__name__)


class CompletionClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {api_key}"},
        )

    async def complete(
        self,
        conversation: Sequence[ConversationTurn],
        tools: Sequence[ToolDeclaration] | None = None,
        tool_choice: str = "auto",
    ) -> ConversationTurn:
        """Send one chat completion request and return the assistant turn."""
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [turn.to_openai() for turn in conversation],
        }
        if tools:
            payload["tools"] = [decl.to_openai() for decl in tools]
            payload["tool_choice"] = tool_choice

        try:
            response = await self._client.post(
                f"{self._base_url}/chat/completions",
                json=payload,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Completion request failed with HTTP {e.response.status_code}",
                e,
                status=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError("Completion request failed", e) from e

        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError("Completion response has no message", e) from e

        turn = parse_assistant_message(message)
        logger.debug(
            "Completion returned %d tool call(s), content length %d",
            len(turn.tool_calls),
            len(turn.content or ""),
        )
        return turn

    async def aclose(self) -> None:
        await self._client.aclose()


def parse_assistant_message(message: dict[str, Any]) -> ConversationTurn:
    """Normalize a Chat Completions ``message`` object into a ConversationTurn."""
    calls = []
    for raw in message.get("tool_calls") or []:
        if raw.get("type", "function") != "function":
            continue
        func = raw.get("function") or {}
        raw_args = func.get("arguments") or "{}"
        if isinstance(raw_args, dict):
            args: Optional[dict[str, Any]] = raw_args
            raw_args = json.dumps(raw_args)
        else:
            try:
                args = json.loads(raw_args)
            except json.JSONDecodeError:
                logger.warning("Failed to parse tool call arguments: %s", raw_args[:200])
                args = None
            if not isinstance(args, dict):
                args = None
        calls.append(
            ToolCallRequest(
                id=raw.get("id", ""),
                name=func.get("name", ""),
                arguments=args,
                raw_arguments=raw_args,
            )
        )
    return ConversationTurn(
        role="assistant",
        content=message.get("content"),
        tool_calls=tuple(calls),
    )
