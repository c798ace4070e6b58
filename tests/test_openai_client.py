import json

import httpx
import pytest

from tubechat.errors import UpstreamError
from tubechat.models import ConversationTurn
from tubechat.openai_client import CompletionClient, parse_assistant_message
from tubechat.tools import YOUTUBE_SEARCH


def completion(message: dict) -> dict:
    return {"id": "chatcmpl-1", "choices": [{"index": 0, "message": message}]}


def client_for(handler, seen: list | None = None) -> CompletionClient:
    def wrapped(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return CompletionClient(
        api_key="sk-test",
        model="gpt-4o-mini",
        base_url="https://api.example.com/v1/",
        transport=httpx.MockTransport(wrapped),
    )


CONVERSATION = (ConversationTurn.system("be nice"), ConversationTurn.user("hi"))


async def test_complete_sends_catalog_and_tool_choice():
    seen: list[httpx.Request] = []
    client = client_for(
        lambda request: httpx.Response(200, json=completion({"role": "assistant", "content": "hello"})),
        seen,
    )

    turn = await client.complete(CONVERSATION, tools=[YOUTUBE_SEARCH], tool_choice="auto")

    assert turn.role == "assistant"
    assert turn.content == "hello"
    assert turn.tool_calls == ()

    (request,) = seen
    assert str(request.url) == "https://api.example.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o-mini"
    assert body["messages"] == [
        {"role": "system", "content": "be nice"},
        {"role": "user", "content": "hi"},
    ]
    assert body["tool_choice"] == "auto"
    function = body["tools"][0]["function"]
    assert function["name"] == "youtube_search"
    assert function["parameters"]["required"] == ["query"]
    assert function["parameters"]["properties"]["maxResults"]["default"] == 5
    await client.aclose()


async def test_complete_without_tools_omits_catalog():
    seen: list[httpx.Request] = []
    client = client_for(
        lambda request: httpx.Response(200, json=completion({"role": "assistant", "content": "ok"})),
        seen,
    )

    await client.complete(CONVERSATION, tools=None)

    body = json.loads(seen[0].content)
    assert "tools" not in body
    assert "tool_choice" not in body


async def test_complete_parses_tool_calls_in_order():
    message = {
        "role": "assistant",
        "content": None,
        "tool_calls": [
            {
                "id": "call_a",
                "type": "function",
                "function": {"name": "youtube_search", "arguments": '{"query": "a"}'},
            },
            {
                "id": "call_b",
                "type": "function",
                "function": {"name": "youtube_search", "arguments": '{"query": "b", "maxResults": 2}'},
            },
        ],
    }
    client = client_for(lambda request: httpx.Response(200, json=completion(message)))

    turn = await client.complete(CONVERSATION, tools=[YOUTUBE_SEARCH])

    assert turn.content is None
    assert [c.id for c in turn.tool_calls] == ["call_a", "call_b"]
    assert turn.tool_calls[1].arguments == {"query": "b", "maxResults": 2}
    # Round-tripped verbatim so the second round echoes what the model sent.
    assert turn.to_openai()["tool_calls"][0]["function"]["arguments"] == '{"query": "a"}'


def test_parse_undecodable_arguments():
    turn = parse_assistant_message(
        {
            "content": None,
            "tool_calls": [
                {"id": "c1", "type": "function", "function": {"name": "youtube_search", "arguments": "{oops"}},
                {"id": "c2", "type": "function", "function": {"name": "youtube_search", "arguments": "[1]"}},
            ],
        }
    )

    assert [c.arguments for c in turn.tool_calls] == [None, None]
    assert turn.tool_calls[0].raw_arguments == "{oops"


@pytest.mark.parametrize("status", [401, 429, 500])
async def test_complete_non_2xx_is_upstream_error(status):
    seen: list[httpx.Request] = []
    client = client_for(lambda request: httpx.Response(status, json={"error": {}}), seen)

    with pytest.raises(UpstreamError) as exc_info:
        await client.complete(CONVERSATION)
    assert exc_info.value.status == status
    assert len(seen) == 1


async def test_complete_transport_error_is_upstream_error():
    def boom(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = client_for(boom)

    with pytest.raises(UpstreamError):
        await client.complete(CONVERSATION)


async def test_complete_malformed_body_is_upstream_error():
    client = client_for(lambda request: httpx.Response(200, json={"choices": []}))

    with pytest.raises(UpstreamError):
        await client.complete(CONVERSATION)
