"""
Chat Relay — Application Context

Every long-lived handle (embedder, vector store, completion client,
chat agent) is built exactly once here, before the app serves traffic,
and handed to the Flask app explicitly.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from answering.chat_agent import ChatAgent
from answering.completion_client import CompletionClient
from config.system_loader import load_config
from core.schemas import CompletionOptions
from core.utils.logging_utils import get_component_logger
from core.vector.embedder import VectorEmbedder
from core.vector.store import ChromaStore


logger = get_component_logger("AppContext", component="api")


@dataclass(frozen=True)
class AppContext:
    agent: ChatAgent
    store: ChromaStore
    embedder: VectorEmbedder
    config: Dict = field(default_factory=dict)

    @property
    def api_config(self) -> Dict:
        return self.config.get("api", {})

    @property
    def service_name(self) -> str:
        return self.config.get("project", {}).get("name", "Chat Relay")


def build_app_context(config: Optional[Dict] = None) -> AppContext:
    """
    Load config (unless given) and initialize all collaborators.

    Raises on any startup failure: the process should not serve
    traffic without a vector store and embedding model.
    """

    config = config or load_config()

    completion_cfg = config["completion"]
    vector_cfg = config["vector_db"]

    logger.info("Initializing embedding model...")
    embedder = VectorEmbedder.from_config(config["embedding"])

    logger.info("Initializing vector DB...")
    store = ChromaStore.from_config(embedder, vector_cfg)

    client = CompletionClient.from_config(completion_cfg)

    options = CompletionOptions(
        model=completion_cfg["model"],
        temperature=completion_cfg["temperature"],
        max_tokens=completion_cfg["max_tokens"]
    )

    agent = ChatAgent(
        store=store,
        client=client,
        options=options,
        history_limit=vector_cfg.get("history_limit", 5)
    )

    return AppContext(agent=agent, store=store, embedder=embedder, config=config)
