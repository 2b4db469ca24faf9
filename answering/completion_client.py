"""
Chat Relay — Completion Client

Thin adapter over a hosted chat-completion model.

The model keeps no memory of its own: the full conversation is sent on
every call. Providers:
    groq   → ChatGroq   (hosted, needs GROQ_API_KEY)
    ollama → ChatOllama (local server)

Failures are never retried; they surface as CompletionError.
"""

import threading
from typing import Callable, Dict, List, Optional, Tuple

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_groq import ChatGroq
from langchain_ollama import ChatOllama

from core.exceptions import CompletionError
from core.schemas import ASSISTANT, USER, CompletionOptions, Conversation
from core.utils.logging_utils import get_component_logger


logger = get_component_logger("CompletionClient", component="completion")


ChatModelFactory = Callable[[CompletionOptions], object]


class CompletionClient:

    def __init__(
        self,
        provider: str = "groq",
        api_key: Optional[str] = None,
        ollama_base_url: str = "http://localhost:11434",
        system_prompt: str = "",
        model_factory: Optional[ChatModelFactory] = None
    ):

        self.provider = provider
        self.api_key = api_key
        self.ollama_base_url = ollama_base_url
        self.system_prompt = system_prompt or ""
        self._model_factory = model_factory or self._build_chat_model

        # One chat model per distinct option set, built on first use
        self._models: Dict[Tuple[str, float, int], object] = {}
        self._lock = threading.Lock()

        logger.info(f"Completion provider: {self.provider}")

    @classmethod
    def from_config(cls, completion_cfg: dict) -> "CompletionClient":
        return cls(
            provider=completion_cfg.get("provider", "groq"),
            api_key=completion_cfg.get("api_key"),
            ollama_base_url=completion_cfg.get(
                "ollama_base_url", "http://localhost:11434"
            ),
            system_prompt=completion_cfg.get("system_prompt", "")
        )

    # =====================================================
    # CHAT MODEL HANDLES
    # =====================================================

    def _build_chat_model(self, options: CompletionOptions):

        if self.provider == "groq":
            return ChatGroq(
                model=options.model,
                temperature=options.temperature,
                max_tokens=options.max_tokens,
                api_key=self.api_key
            )

        if self.provider == "ollama":
            return ChatOllama(
                model=options.model,
                temperature=options.temperature,
                num_predict=options.max_tokens,
                base_url=self.ollama_base_url
            )

        raise CompletionError(f"Unsupported completion provider: {self.provider}")

    def _get_chat_model(self, options: CompletionOptions):

        key = (options.model, float(options.temperature), int(options.max_tokens))

        with self._lock:
            if key not in self._models:
                logger.info(f"Loading chat model {options.model} (lazy load)...")
                self._models[key] = self._model_factory(options)
            return self._models[key]

    # =====================================================
    # MESSAGE CONVERSION
    # =====================================================

    def to_messages(self, conversation: Conversation) -> List[BaseMessage]:

        messages: List[BaseMessage] = []

        if self.system_prompt:
            messages.append(SystemMessage(content=self.system_prompt))

        for turn in conversation:
            role = turn.get("role")
            content = turn.get("content", "")

            if role == USER:
                messages.append(HumanMessage(content=content))
            elif role == ASSISTANT:
                messages.append(AIMessage(content=content))
            else:
                raise CompletionError(f"Unsupported conversation role: {role!r}")

        return messages

    # =====================================================
    # COMPLETE
    # =====================================================

    def complete(self, conversation: Conversation, options: CompletionOptions) -> str:

        if not conversation:
            raise CompletionError("Conversation is empty")

        messages = self.to_messages(conversation)

        try:
            llm = self._get_chat_model(options)
            result = llm.invoke(messages)
        except CompletionError:
            raise
        except Exception as exc:
            logger.exception("Completion request failed")
            raise CompletionError(f"Completion request failed: {exc}") from exc

        content = getattr(result, "content", result)

        if not isinstance(content, str):
            raise CompletionError(
                f"Completion returned {type(content).__name__}, expected text"
            )

        if not content.strip():
            logger.warning(f"Completion returned blank text (model={options.model})")

        logger.info(
            f"Completion ok (model={options.model}, turns={len(conversation)}, "
            f"chars={len(content)})"
        )
        return content
