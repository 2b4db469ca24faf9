"""
Chat Relay — Chat Agent

This agent:
- Validates the incoming message
- Retrieves similar prior messages from the vector store
- Builds the conversation (history first, current turn last)
- Calls the completion client
- Persists the user message and the reply

Single pass, no retries:
    received → history_fetched → completed → persisted → responded
with an early exit to failed on validation or completion errors.

History and persistence failures are masked: the user still gets a reply.
"""

from typing import Optional

from answering.completion_client import CompletionClient
from answering.conversation import build_conversation
from core.exceptions import CompletionError, StoreError, ValidationError
from core.schemas import (
    ASSISTANT,
    USER,
    ChatMessage,
    ChatState,
    ChatTurn,
    CompletionOptions,
)
from core.utils.logging_utils import get_component_logger
from core.vector.store import ChromaStore


logger = get_component_logger("ChatAgent", component="completion")


DEFAULT_HISTORY_LIMIT = 5


class ChatAgent:

    def __init__(
        self,
        store: ChromaStore,
        client: CompletionClient,
        options: CompletionOptions,
        history_limit: int = DEFAULT_HISTORY_LIMIT
    ):

        if history_limit < 1:
            raise ValueError(f"history_limit must be >= 1, got {history_limit}")

        self.store = store
        self.client = client
        self.options = options
        self.history_limit = history_limit

        logger.info(
            f"ChatAgent ready (model={options.model}, "
            f"temperature={options.temperature}, max_tokens={options.max_tokens}, "
            f"history_limit={history_limit})"
        )

    # ============================================================
    # PUBLIC API
    # ============================================================

    def respond(self, message: Optional[str]) -> ChatTurn:

        # -----------------------------------------------
        # 1. Received
        # -----------------------------------------------

        if not isinstance(message, str) or not message.strip():
            raise ValidationError("Message is required")

        turn = ChatTurn(message=message)

        # -----------------------------------------------
        # 2. History
        # -----------------------------------------------

        turn.history = self.store.query_similar(message, k=self.history_limit)

        if not turn.history.ok:
            logger.warning(
                f"History unavailable, continuing without it: {turn.history.error}"
            )

        turn.state = ChatState.HISTORY_FETCHED
        turn.conversation = build_conversation(turn.history, message)

        # -----------------------------------------------
        # 3. Completion
        # -----------------------------------------------

        try:
            turn.reply = self.client.complete(turn.conversation, self.options)
        except CompletionError:
            turn.state = ChatState.FAILED
            logger.error(
                f"Completion failed ({len(turn.conversation)} turns); "
                "nothing persisted"
            )
            raise

        turn.state = ChatState.COMPLETED

        # -----------------------------------------------
        # 4. Persist (user first, then assistant)
        # -----------------------------------------------

        for role, content in ((USER, message), (ASSISTANT, turn.reply)):
            if self._persist(ChatMessage.create(role, content)):
                turn.persisted += 1

        turn.state = ChatState.PERSISTED

        # -----------------------------------------------
        # 5. Responded
        # -----------------------------------------------

        turn.state = ChatState.RESPONDED
        logger.info(
            f"Chat turn done (history={len(turn.history)}, "
            f"persisted={turn.persisted}/2)"
        )
        return turn

    # ============================================================
    # PERSISTENCE
    # ============================================================

    def _persist(self, chat_message: ChatMessage) -> bool:

        try:
            self.store.store(chat_message)
            return True
        except StoreError:
            logger.exception(f"Error storing {chat_message.role} message")
            return False
