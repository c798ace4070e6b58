import logging
from enum import Enum

from tubechat.errors import ChatError, InvalidArgument, TubechatError
from tubechat.models import ChatResult, ConversationTurn, VideoRecord
from tubechat.openai_client import CompletionClient
from tubechat.tools.executor import ToolExecutor
from tubechat.tools.registry import ToolRegistry
from tubechat.tools.youtube_search import SEARCH_TOOL

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI YouTube assistant that recommends videos.\n"
    "- Provide clean, concise answers.\n"
    "- Format replies with Markdown: **bold** titles, short headings and bullet lists.\n"
    "- Call the youtube_search tool when helpful, e.g. whenever the user asks for "
    "videos or recommendations on a topic."
)


class ChatState(str, Enum):
    IDLE = "idle"
    AWAITING_FIRST_COMPLETION = "awaiting_first_completion"
    NO_TOOL_CALL = "no_tool_call"
    TOOL_CALLS_PENDING = "tool_calls_pending"
    AWAITING_SECOND_COMPLETION = "awaiting_second_completion"
    DONE = "done"


_TRANSITIONS: dict[ChatState, frozenset[ChatState]] = {
    ChatState.IDLE: frozenset({ChatState.AWAITING_FIRST_COMPLETION}),
    ChatState.AWAITING_FIRST_COMPLETION: frozenset({ChatState.NO_TOOL_CALL, ChatState.TOOL_CALLS_PENDING}),
    ChatState.NO_TOOL_CALL: frozenset({ChatState.DONE}),
    ChatState.TOOL_CALLS_PENDING: frozenset({ChatState.AWAITING_SECOND_COMPLETION}),
    ChatState.AWAITING_SECOND_COMPLETION: frozenset({ChatState.DONE}),
    ChatState.DONE: frozenset(),
}


class Agent:
    def __init__(
        self,
        completions: CompletionClient,
        registry: ToolRegistry,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self._completions = completions
        self._registry = registry
        self._executor = ToolExecutor(registry)
        self._system_prompt = system_prompt

    async def chat(self, message: str) -> ChatResult:
        """Answer one user message, searching YouTube if the model asks to."""
        if not isinstance(message, str) or not message.strip():
            raise InvalidArgument("Message is required")

        try:
            return await self._run(message)
        except TubechatError as e:
            logger.error("Chat failed: %s", e)
            raise ChatError(str(e)) from e
        except Exception as e:
            logger.exception("Unexpected error while handling chat")
            raise ChatError("Chat processing error") from e

    async def _run(self, message: str) -> ChatResult:
        state = ChatState.IDLE
        conversation: tuple[ConversationTurn, ...] = (
            ConversationTurn.system(self._system_prompt),
            ConversationTurn.user(message),
        )

        state = self._advance(state, ChatState.AWAITING_FIRST_COMPLETION)
        first = await self._completions.complete(
            conversation, tools=self._registry.list_declarations(), tool_choice="auto"
        )

        if not first.tool_calls:
            state = self._advance(state, ChatState.NO_TOOL_CALL)
            state = self._advance(state, ChatState.DONE)
            return ChatResult(reply=first.content or "", videos=())

        state = self._advance(state, ChatState.TOOL_CALLS_PENDING)
        videos: tuple[VideoRecord, ...] = ()
        tool_turns: list[ConversationTurn] = []

        for call in first.tool_calls:
            logger.info("Model requested tool %s (call %s)", call.name, call.id)
            result = await self._executor.execute(call)
            if call.name == SEARCH_TOOL:
                # Last search call wins, including a failed one.
                videos = () if result.is_error else tuple(result.payload)
            tool_turns.append(ConversationTurn.tool(result))

        conversation = conversation + (first,) + tuple(tool_turns)

        state = self._advance(state, ChatState.AWAITING_SECOND_COMPLETION)
        second = await self._completions.complete(conversation, tools=None)
        if second.tool_calls:
            logger.warning(
                "Ignoring %d tool call(s) requested in the final round", len(second.tool_calls)
            )

        state = self._advance(state, ChatState.DONE)
        return ChatResult(reply=second.content or "", videos=videos)

    @staticmethod
    def _advance(current: ChatState, new: ChatState) -> ChatState:
        if new not in _TRANSITIONS[current]:
            raise RuntimeError(f"Illegal chat state transition {current.value} -> {new.value}")
        logger.debug("Chat state %s -> %s", current.value, new.value)
        return new
