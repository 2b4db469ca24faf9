"""
Shared fakes for the Chat Relay test-suite.

Nothing here touches the network or downloads a model: the sentence
transformer, the Chroma collection and the completion provider are all
replaced with small in-memory stand-ins.
"""

import hashlib
import os
import tempfile

os.environ.setdefault("CHATRELAY_LOG_DIR", tempfile.mkdtemp(prefix="chatrelay-logs-"))

import numpy as np
import pytest

from answering.chat_agent import ChatAgent
from api import create_app
from api.context import AppContext
from core.exceptions import CompletionError, StoreError
from core.schemas import CompletionOptions, HistoryMatch, HistoryResult
from core.vector.embedder import VectorEmbedder
from core.vector.store import ChromaStore


PUBLIC_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "public")
EMBEDDING_DIM = 8


# =====================================================
# Embedding model stand-in
# =====================================================

class FakeSentenceModel:
    """Deterministic token embeddings seeded from the text itself."""

    def __init__(self, dim=EMBEDDING_DIM):
        self.dim = dim
        self.calls = 0

    def encode(self, sentences, output_value="sentence_embedding"):
        assert output_value == "token_embeddings"
        self.calls += 1

        outputs = []
        for text in sentences:
            seed = int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)
            rng = np.random.default_rng(seed)
            n_tokens = max(len(text.split()), 1)
            outputs.append(rng.normal(size=(n_tokens, self.dim)).astype(np.float32))
        return outputs

    def get_sentence_embedding_dimension(self):
        return self.dim


# =====================================================
# Chroma collection stand-in
# =====================================================

class FakeCollection:

    def __init__(self):
        self.records = []
        self.fail_add = False
        self.fail_query = False

    def add(self, ids, embeddings, metadatas, documents):
        if self.fail_add:
            raise ConnectionError("chroma unavailable")
        for record in zip(ids, embeddings, metadatas, documents):
            self.records.append(record)

    def count(self):
        if self.fail_query:
            raise ConnectionError("chroma unavailable")
        return len(self.records)

    def peek(self, limit=10):
        head = self.records[:limit]
        return {
            "ids": [r[0] for r in head],
            "embeddings": [r[1] for r in head],
            "metadatas": [r[2] for r in head],
            "documents": [r[3] for r in head],
        }

    def query(self, query_embeddings, n_results):
        if self.fail_query:
            raise ConnectionError("chroma unavailable")

        query = np.asarray(query_embeddings[0])
        ranked = sorted(
            self.records,
            key=lambda r: float(np.dot(query, np.asarray(r[1]))),
            reverse=True,
        )[:n_results]

        return {
            "ids": [[r[0] for r in ranked]],
            "metadatas": [[r[2] for r in ranked]],
            "documents": [[r[3] for r in ranked]],
            "distances": [[1 - float(np.dot(query, np.asarray(r[1]))) for r in ranked]],
        }


class FakeChromaClient:

    def __init__(self, collection=None):
        self.collection = collection or FakeCollection()
        self.requested = []

    def get_or_create_collection(self, name, metadata=None):
        self.requested.append((name, metadata))
        return self.collection


# =====================================================
# Store + completion stand-ins for the agent
# =====================================================

class RecordingStore:
    """Duck-typed ChromaStore that records writes."""

    def __init__(self, history=None, fail_writes=False):
        self.history = history if history is not None else HistoryResult()
        self.fail_writes = fail_writes
        self.queries = []
        self.stored = []

    def query_similar(self, text, k=5):
        self.queries.append((text, k))
        return self.history

    def store(self, message):
        self.stored.append(message)
        if self.fail_writes:
            raise StoreError("chroma unavailable")

    def count(self):
        return len(self.stored)


class StubCompletionClient:

    def __init__(self, reply="stubbed reply", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, conversation, options):
        self.calls.append((list(conversation), options))
        if self.error:
            raise CompletionError(self.error)
        return self.reply


def history_of(*pairs):
    return HistoryResult(
        matches=[HistoryMatch(content=content, role=role) for role, content in pairs]
    )


# =====================================================
# Fixtures
# =====================================================

@pytest.fixture
def options():
    return CompletionOptions(model="llama-3.3-70b-versatile", temperature=0.7, max_tokens=1024)


@pytest.fixture
def embedder():
    return VectorEmbedder(model_name="fake-minilm", model=FakeSentenceModel())


@pytest.fixture
def chroma_client():
    return FakeChromaClient()


@pytest.fixture
def chroma_store(embedder, chroma_client):
    return ChromaStore(embedder, client=chroma_client)


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def completion_client():
    return StubCompletionClient()


@pytest.fixture
def make_client():
    """Build a Flask test client around a given store / completion client."""

    def _make(store, client, options):
        agent = ChatAgent(store=store, client=client, options=options)
        context = AppContext(
            agent=agent,
            store=store,
            embedder=VectorEmbedder(model_name="fake-minilm", model=FakeSentenceModel()),
            config={
                "project": {"name": "Chat Relay"},
                "api": {"static_dir": PUBLIC_DIR, "cors_origins": "*"},
            },
        )
        app = create_app(context)
        app.config["TESTING"] = True
        return app.test_client()

    return _make
