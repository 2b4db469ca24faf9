"""
Chat Relay — Vector Store (Chroma)

Responsibilities:
- Connect to the Chroma server holding the chat history
- Create the collection if it is missing
- Write one embedded record per chat message
- Similarity search over prior messages, masked to empty on failure

Config Source:
- config/db.yaml → vector_db

Record schema:
    id        → ChatMessage.id
    embedding → VectorEmbedder.embed(content)
    metadata  → {"role": ..., "timestamp": ...}
    document  → content
"""

from typing import Optional

import chromadb

from core.exceptions import ConfigError, EmbeddingError, StoreError
from core.schemas import VALID_ROLES, ChatMessage, HistoryMatch, HistoryResult
from core.utils.logging_utils import get_component_logger
from core.vector.embedder import VectorEmbedder


logger = get_component_logger("ChromaStore", component="retrieval")


class ChromaStore:

    def __init__(
        self,
        embedder: VectorEmbedder,
        host: str = "localhost",
        port: int = 8000,
        ssl: bool = False,
        collection_name: str = "chat_history",
        description: str = "Store chat history embeddings",
        distance_metric: str = "cosine",
        client=None
    ):

        self.embedder = embedder
        self.host = host
        self.port = port
        self.ssl = ssl
        self.collection_name = collection_name
        self.distance_metric = distance_metric

        scheme = "https" if self.ssl else "http"
        logger.info(f"Chroma Address  : {scheme}://{self.host}:{self.port}")
        logger.info(f"Collection Name : {self.collection_name}")
        logger.info(f"Distance Metric : {self.distance_metric}")

        try:
            self.client = client or chromadb.HttpClient(
                host=self.host,
                port=self.port,
                ssl=self.ssl
            )

            self.collection = self.client.get_or_create_collection(
                name=self.collection_name,
                metadata={
                    "description": description,
                    "hnsw:space": self.distance_metric
                }
            )

            self._check_dimension()

            logger.info("Vector DB initialized successfully")

        except Exception:
            logger.exception("Error initializing vector DB")
            raise

    @classmethod
    def from_config(cls, embedder: VectorEmbedder, vector_cfg: dict) -> "ChromaStore":

        collection_cfg = vector_cfg.get("collection", {})

        return cls(
            embedder=embedder,
            host=vector_cfg.get("host", "localhost"),
            port=int(vector_cfg.get("port", 8000)),
            ssl=bool(vector_cfg.get("ssl", False)),
            collection_name=collection_cfg.get("name", "chat_history"),
            description=collection_cfg.get(
                "description", "Store chat history embeddings"
            ),
            distance_metric=collection_cfg.get("distance_metric", "cosine")
        )

    # -------------------------------------------------
    # Dimension Check
    # -------------------------------------------------

    def _check_dimension(self) -> None:
        """
        An existing collection must hold vectors of the embedder's size.
        Raises ConfigError on mismatch.
        """

        expected = self.embedder.dimension
        if expected is None:
            return

        sample = self.collection.peek(1) or {}
        embeddings = sample.get("embeddings")

        if embeddings is None or len(embeddings) == 0:
            return

        stored = len(embeddings[0])
        if stored != expected:
            raise ConfigError(
                f"Collection '{self.collection_name}' holds {stored}-dim vectors "
                f"but the embedding model produces {expected}-dim vectors"
            )

    # -------------------------------------------------
    # Store One Message
    # -------------------------------------------------

    def store(self, message: ChatMessage) -> None:
        """
        Embed and write ``message`` as a single record.

        Raises StoreError on any embedding or backend failure.
        """

        try:
            embedding = self.embedder.embed(message.content)
        except EmbeddingError as exc:
            raise StoreError(f"Could not embed {message.role} message: {exc}") from exc

        try:
            self.collection.add(
                ids=[message.id],
                embeddings=[embedding],
                metadatas=[message.metadata()],
                documents=[message.content]
            )
        except Exception as exc:
            raise StoreError(f"Could not write message {message.id}: {exc}") from exc

        logger.debug(f"Stored {message.role} message {message.id}")

    # -------------------------------------------------
    # Similarity Query
    # -------------------------------------------------

    def query_similar(self, text: str, k: int = 5) -> HistoryResult:
        """
        Return up to ``k`` stored messages most similar to ``text``,
        most similar first.

        Never raises for backend or embedding problems: those yield an
        empty HistoryResult with ``error`` set.
        """

        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")

        try:
            if self.collection.count() == 0:
                return HistoryResult()

            query_embedding = self.embedder.embed(text)

            results = self.collection.query(
                query_embeddings=[query_embedding],
                n_results=k
            )

        except Exception as exc:
            logger.exception("Error retrieving chat history")
            return HistoryResult.failed(str(exc))

        return HistoryResult(matches=self._format_results(results))

    # -------------------------------------------------
    # FORMAT CHROMA RESULTS
    # -------------------------------------------------

    def _format_results(self, results: Optional[dict]) -> list:

        if not results:
            return []

        documents = (results.get("documents") or [[]])[0] or []
        metadatas = (results.get("metadatas") or [[]])[0] or []

        matches = []

        for idx, document in enumerate(documents):

            metadata = metadatas[idx] if idx < len(metadatas) else None
            role = (metadata or {}).get("role")

            if role not in VALID_ROLES or document is None:
                logger.warning(f"Skipping history record with role={role!r}")
                continue

            matches.append(HistoryMatch(content=document, role=role))

        return matches

    # -------------------------------------------------
    # Stats
    # -------------------------------------------------

    def count(self) -> int:

        try:
            return self.collection.count()
        except Exception:
            logger.exception("Vector DB count failed")
            return 0
