"""
Chat Relay — Answering Module

Provides:
- ChatAgent          → Request lifecycle orchestration
- CompletionClient   → Hosted chat-completion adapter
- build_conversation → History + current turn, in prompt order

Usage:

    from answering import ChatAgent

    agent = ChatAgent(store, client, options)
    turn = agent.respond("What did I ask earlier?")

    print(turn.reply)
"""

from .chat_agent import ChatAgent
from .completion_client import CompletionClient
from .conversation import build_conversation


__all__ = [
    "ChatAgent",
    "CompletionClient",
    "build_conversation",
]

__version__ = "1.0.0"
