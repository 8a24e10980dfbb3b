"""Chat session controller.

Holds the transcript of one storefront conversation, resolves the model
settings and prompts from the variant source, and forwards the transcript to
the completion provider together with the session's tool registry.
"""

import inspect
from typing import Any, Awaitable, Callable, List, Optional, Union

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from storefront.agent.completion import ChatSettings, CompletionProvider
from storefront.agent.prompts import (
    APOLOGY_MESSAGE,
    DEFAULT_GREETING,
    DEFAULT_SYSTEM_PROMPT,
    VARIANT_ASSISTANT_MESSAGE,
    VARIANT_CHAT_PROMPT,
    VARIANT_MAX_TOKENS,
    VARIANT_MODEL,
    VARIANT_TEMPERATURE,
)
from storefront.analytics.error_tracker import error_tracker
from storefront.analytics.logger import logger
from storefront.mcp.mcp_client import MCPToolRegistry
from storefront.services.variants import VariantSource
from storefront.utils.config import settings

UpdateCallback = Callable[[], Union[None, Awaitable[None]]]


def _message_text(message: Optional[BaseMessage]) -> str:
    """Plain text of a message whose content may be a list of content blocks."""
    if message is None:
        return ""
    content: Any = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class ChatSession:
    """One conversation between a storefront user and the assistant."""

    def __init__(
        self,
        completion_provider: CompletionProvider,
        variant_source: VariantSource,
        tools: Optional[MCPToolRegistry] = None,
    ):
        self.completion_provider = completion_provider
        self.variant_source = variant_source
        self.tools = tools
        self.messages: List[BaseMessage] = []
        self.chat_settings = ChatSettings(
            model_id=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )
        self.initialized = False

    async def initialize(self) -> None:
        """Resolve settings and prompts, then seed the transcript. Runs once."""
        if self.initialized:
            return

        self.chat_settings = ChatSettings(
            model_id=self.variant_source.get_value(VARIANT_MODEL) or settings.llm_model,
            max_tokens=self._resolve_number(VARIANT_MAX_TOKENS, int, settings.llm_max_tokens),
            temperature=self._resolve_number(VARIANT_TEMPERATURE, float, settings.llm_temperature),
        )
        logger.debug(f"Chat model: {self.chat_settings.model_id}")

        prompt = self.variant_source.get_value(VARIANT_CHAT_PROMPT) or DEFAULT_SYSTEM_PROMPT
        self.messages.append(SystemMessage(content=prompt))

        greeting = self.variant_source.get_value(VARIANT_ASSISTANT_MESSAGE) or DEFAULT_GREETING
        self.messages.append(AIMessage(content=greeting))
        self.initialized = True

    def _resolve_number(self, key: str, cast, default):
        raw = self.variant_source.get_value(key)
        if raw is None:
            return default
        try:
            return cast(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring unparsable {key} variant value: {raw!r}")
            return default

    async def add_user_message(self, user_text: str, on_update: Optional[UpdateCallback] = None) -> None:
        """Append the user's turn and the assistant's reply (or an apology)."""
        self.messages.append(HumanMessage(content=user_text))
        await self._fire(on_update)

        try:
            response = await self.completion_provider.complete(
                self.messages, self.chat_settings, self.tools
            )
            reply = _message_text(response)
            if reply.strip():
                self.messages.append(AIMessage(content=reply))
        except Exception as e:
            error_tracker.record_error(
                "completion_error", str(e), {"model": self.chat_settings.model_id}
            )
            logger.error(f"Error getting chat completions: {e}", exc_info=True)
            self.messages.append(AIMessage(content=APOLOGY_MESSAGE))

        await self._fire(on_update)

    @staticmethod
    async def _fire(callback: Optional[UpdateCallback]) -> None:
        if callback is None:
            return
        result = callback()
        if inspect.isawaitable(result):
            await result

    def transcript(self) -> List[dict]:
        """Role-tagged transcript for display."""
        roles = {"system": "system", "ai": "assistant", "human": "user"}
        return [
            {"role": roles.get(message.type, message.type), "content": _message_text(message)}
            for message in self.messages
        ]
