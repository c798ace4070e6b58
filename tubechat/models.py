import json
from dataclasses import dataclass, field
from typing import Any, Optional


def _to_json(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass(frozen=True)
class VideoRecord:
    video_id: str
    title: str
    thumbnail_url: str    # empty when the provider sent no thumbnail
    channel_title: str
    published_at: str     # ISO 8601, as returned by YouTube

    def to_dict(self) -> dict[str, Any]:
        return {
            "videoId": self.video_id,
            "title": self.title,
            "thumbnail": self.thumbnail_url,
            "channelTitle": self.channel_title,
            "publishedAt": self.published_at,
        }


@dataclass(frozen=True)
class ToolParameter:
    name: str
    type: str             # JSON schema type: "string", "integer", ...
    description: str = ""
    required: bool = False
    default: Any = None


@dataclass(frozen=True)
class ToolDeclaration:
    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    def to_openai(self) -> dict[str, Any]:
        """Render as an entry of the Chat Completions ``tools`` array."""
        properties: dict[str, Any] = {}
        for param in self.parameters:
            prop: dict[str, Any] = {"type": param.type}
            if param.description:
                prop["description"] = param.description
            if param.default is not None:
                prop["default"] = param.default
            properties[param.name] = prop
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "required": [p.name for p in self.parameters if p.required],
                    "properties": properties,
                },
            },
        }


@dataclass(frozen=True)
class ToolCallRequest:
    id: str
    name: str
    arguments: Optional[dict[str, Any]]   # None = provider sent undecodable JSON
    raw_arguments: str = "{}"

    def to_openai(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.raw_arguments},
        }


@dataclass(frozen=True)
class ToolResult:
    tool_call_id: str
    name: str
    payload: Any
    is_error: bool = False

    @classmethod
    def error(cls, tool_call_id: str, name: str, message: str) -> "ToolResult":
        return cls(tool_call_id=tool_call_id, name=name, payload={"error": message}, is_error=True)

    def content(self) -> str:
        return json.dumps(self.payload, ensure_ascii=False, default=_to_json)


@dataclass(frozen=True)
class ConversationTurn:
    role: str             # "system" | "user" | "assistant" | "tool"
    content: Optional[str] = None
    tool_calls: tuple[ToolCallRequest, ...] = ()
    tool_call_id: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def system(cls, content: str) -> "ConversationTurn":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "ConversationTurn":
        return cls(role="user", content=content)

    @classmethod
    def tool(cls, result: ToolResult) -> "ConversationTurn":
        return cls(
            role="tool",
            content=result.content(),
            tool_call_id=result.tool_call_id,
            name=result.name,
        )

    def to_openai(self) -> dict[str, Any]:
        message: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [call.to_openai() for call in self.tool_calls]
        if self.tool_call_id is not None:
            message["tool_call_id"] = self.tool_call_id
        if self.role == "tool" and self.name:
            message["name"] = self.name
        return message


@dataclass(frozen=True)
class ChatResult:
    reply: str
    videos: tuple[VideoRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"reply": self.reply, "videos": [v.to_dict() for v in self.videos]}
