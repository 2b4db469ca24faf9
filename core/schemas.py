"""
Chat Relay — Data Model

ChatMessage is the only persisted entity; everything else is built fresh
per request and discarded once the reply has been sent.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

# =====================================================
# ROLES
# =====================================================

USER = "user"
ASSISTANT = "assistant"

VALID_ROLES = (USER, ASSISTANT)

# Conversation = ordered list of {"role": ..., "content": ...}
Conversation = List[Dict[str, str]]


# =====================================================
# CHAT MESSAGE
# =====================================================

@dataclass(frozen=True)
class ChatMessage:
    """One stored turn. Created once, never mutated or deleted."""

    id: str
    role: str
    content: str
    timestamp: str

    @classmethod
    def create(cls, role: str, content: str) -> "ChatMessage":
        if role not in VALID_ROLES:
            raise ValueError(f"Invalid role: {role!r}")

        return cls(
            id=uuid.uuid4().hex,
            role=role,
            content=content,
            timestamp=datetime.now(timezone.utc).isoformat(timespec="microseconds")
        )

    def metadata(self) -> Dict[str, str]:
        return {"role": self.role, "timestamp": self.timestamp}


# =====================================================
# SIMILARITY QUERY RESULTS
# =====================================================

@dataclass(frozen=True)
class HistoryMatch:
    content: str
    role: str

    def to_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class HistoryResult:
    """
    Outcome of a similarity query.

    An empty ``matches`` list means either "nothing similar stored yet"
    (``error is None``) or "backend failed, history masked" (``error`` set).
    """

    matches: List[HistoryMatch] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __len__(self) -> int:
        return len(self.matches)

    @classmethod
    def failed(cls, error: str) -> "HistoryResult":
        return cls(matches=[], error=error)


# =====================================================
# REQUEST LIFECYCLE
# =====================================================

class ChatState(str, Enum):
    RECEIVED = "received"
    HISTORY_FETCHED = "history_fetched"
    COMPLETED = "completed"
    PERSISTED = "persisted"
    RESPONDED = "responded"
    FAILED = "failed"


@dataclass
class CompletionOptions:
    model: str
    temperature: float = 0.7
    max_tokens: int = 1024


@dataclass
class ChatTurn:
    """Record of a single orchestrated /chat request."""

    message: str
    state: ChatState = ChatState.RECEIVED
    history: HistoryResult = field(default_factory=HistoryResult)
    conversation: Conversation = field(default_factory=list)
    reply: str = ""
    persisted: int = 0
