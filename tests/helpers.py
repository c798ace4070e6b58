import json

from tubechat.models import ConversationTurn, ToolCallRequest, VideoRecord


def make_video(n: int) -> VideoRecord:
    return VideoRecord(
        video_id=f"vid{n}",
        title=f"Video {n}",
        thumbnail_url=f"https://i.ytimg.com/vi/vid{n}/mqdefault.jpg",
        channel_title=f"Channel {n}",
        published_at="2024-01-01T00:00:00Z",
    )


def tool_call(call_id: str, name: str, arguments: dict) -> ToolCallRequest:
    return ToolCallRequest(
        id=call_id, name=name, arguments=arguments, raw_arguments=json.dumps(arguments)
    )


def assistant(content: str | None = None, *calls: ToolCallRequest) -> ConversationTurn:
    return ConversationTurn(role="assistant", content=content, tool_calls=tuple(calls))


def search_item(n: int, thumbnails: dict | None = None) -> dict:
    return {
        "id": {"kind": "youtube#video", "videoId": f"vid{n}"},
        "snippet": {
            "title": f"Video {n}",
            "channelTitle": f"Channel {n}",
            "publishedAt": "2024-01-01T00:00:00Z",
            "thumbnails": thumbnails
            if thumbnails is not None
            else {"medium": {"url": f"https://i.ytimg.com/vi/vid{n}/mqdefault.jpg"}},
        },
    }


class FakeAuthResponse:
    def __init__(self, status: int, payload: dict):
        self.status = status
        self.headers = {"content-type": "application/json"}
        self.data = json.dumps(payload).encode("utf-8")


class FakeAuthRequest:
    """Stands in for ``google.auth.transport.requests.Request`` during token refresh."""

    def __init__(self, status: int = 200, payload: dict | None = None):
        self.status = status
        self.payload = payload if payload is not None else {"access_token": "at-1", "expires_in": 3599}
        self.calls: list[dict] = []

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "method": method, "body": body})
        return FakeAuthResponse(self.status, self.payload)
