"""Completion providers for the chat assistant."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, ToolMessage
from langchain_openai import ChatOpenAI

from storefront.analytics.logger import logger
from storefront.mcp.mcp_client import MCPToolRegistry
from storefront.utils.config import settings


@dataclass
class ChatSettings:
    """Model settings resolved for one chat session."""

    model_id: str
    max_tokens: int
    temperature: float


class CompletionError(RuntimeError):
    """The completion provider could not produce a reply."""


class CompletionProvider(ABC):
    """Produces the assistant's reply for a transcript."""

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[BaseMessage],
        chat_settings: ChatSettings,
        tools: Optional[MCPToolRegistry] = None,
    ) -> AIMessage:
        """Return the assistant's reply; may call ``tools`` while producing it."""


class LangChainCompletionProvider(CompletionProvider):
    """Completion via a LangChain chat model with a bounded tool-call loop."""

    def __init__(self, provider: Optional[str] = None, max_tool_rounds: Optional[int] = None):
        self.provider = (provider or settings.llm_provider).lower()
        self.max_tool_rounds = max_tool_rounds or settings.max_tool_rounds
        self._llm_cache: Dict[Tuple[str, int, float], BaseChatModel] = {}

    def _initialize_llm(self, chat_settings: ChatSettings) -> BaseChatModel:
        """Initialize (or reuse) the chat model for these settings."""
        key = (chat_settings.model_id, chat_settings.max_tokens, chat_settings.temperature)
        if key in self._llm_cache:
            return self._llm_cache[key]

        if self.provider == "anthropic":
            if not settings.anthropic_api_key:
                raise ValueError("ANTHROPIC_API_KEY is required when using Anthropic provider")
            llm = ChatAnthropic(
                model=chat_settings.model_id,
                temperature=chat_settings.temperature,
                max_tokens=chat_settings.max_tokens,
                anthropic_api_key=settings.anthropic_api_key,
            )
        elif self.provider == "openai":
            if not settings.openai_api_key:
                raise ValueError("OPENAI_API_KEY is required when using OpenAI provider")
            llm = ChatOpenAI(
                model=chat_settings.model_id,
                temperature=chat_settings.temperature,
                max_tokens=chat_settings.max_tokens,
                openai_api_key=settings.openai_api_key,
            )
        else:
            raise ValueError(
                f"Unsupported LLM provider: {self.provider}. Use 'anthropic' or 'openai'"
            )

        logger.info(f"Initialized {self.provider} LLM: {chat_settings.model_id}")
        self._llm_cache[key] = llm
        return llm

    async def complete(
        self,
        messages: Sequence[BaseMessage],
        chat_settings: ChatSettings,
        tools: Optional[MCPToolRegistry] = None,
    ) -> AIMessage:
        llm = self._initialize_llm(chat_settings)
        runnable = llm.bind_tools(tools.as_langchain_tools()) if tools and tools.tools else llm

        # Tool exchanges stay in this working copy, never in the caller's transcript
        conversation: List[BaseMessage] = list(messages)
        for _ in range(self.max_tool_rounds + 1):
            response = await runnable.ainvoke(conversation)
            if tools is None or not getattr(response, "tool_calls", None):
                return response

            conversation.append(response)
            for tool_call in response.tool_calls:
                logger.info(f"Model called tool: {tool_call['name']}")
                result = await tools.invoke(tool_call["name"], tool_call.get("args") or {})
                conversation.append(ToolMessage(content=result, tool_call_id=tool_call["id"]))

        raise CompletionError(f"Exceeded {self.max_tool_rounds} tool-call rounds")
