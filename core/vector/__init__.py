"""
Chat Relay — Vector Module

Components:
    - VectorEmbedder → Mean-pooled, L2-normalized sentence embeddings
    - ChromaStore    → Chat history collection on a Chroma server

Example Usage:

    from core.vector import ChromaStore, VectorEmbedder

    embedder = VectorEmbedder()
    store = ChromaStore(embedder, host="localhost", port=8000)
    history = store.query_similar("hello", k=5)
"""

from .embedder import VectorEmbedder
from .store import ChromaStore


__all__ = [
    "VectorEmbedder",
    "ChromaStore",
]
