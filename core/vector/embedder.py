"""
Chat Relay — Vector Embedder

Responsibilities:
- Load the sentence-transformer model once at startup
- Support CPU / CUDA device selection
- Mean-pool token embeddings into one vector per text
- L2-normalize so cosine similarity is a dot product downstream

Config Sources:
- config/models.yaml → embedding
"""

from typing import List, Optional

import numpy as np
from sentence_transformers import SentenceTransformer

from core.exceptions import EmbeddingError
from core.utils.logging_utils import get_component_logger


logger = get_component_logger("VectorEmbedder", component="retrieval")

DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


# -------------------------------------------------
# Pooling Helpers
# -------------------------------------------------

def _to_numpy(tensor) -> np.ndarray:
    if hasattr(tensor, "detach"):
        tensor = tensor.detach().cpu().numpy()
    return np.asarray(tensor, dtype=np.float32)


def mean_pool(token_embeddings) -> np.ndarray:
    """Average a ``(tokens, dim)`` matrix into a single ``(dim,)`` vector."""

    tokens = _to_numpy(token_embeddings)

    if tokens.ndim != 2 or tokens.shape[0] == 0:
        raise EmbeddingError(
            f"Expected a non-empty (tokens, dim) matrix, got shape {tokens.shape}"
        )

    return tokens.mean(axis=0)


def l2_normalize(vector: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(vector))

    if norm == 0.0 or not np.isfinite(norm):
        raise EmbeddingError("Cannot normalize a zero or non-finite vector")

    return vector / norm


class VectorEmbedder:
    """
    Turns text into a fixed-length, unit-norm embedding vector.

    ``model`` may be injected (tests pass a stub exposing ``encode``);
    otherwise a ``SentenceTransformer`` is loaded from ``model_name``.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL,
        device: str = "cpu",
        model: Optional[SentenceTransformer] = None
    ):

        self.model_name = model_name
        self.device = device
        self.model = model

        logger.info(f"Model  : {self.model_name}")
        logger.info(f"Device : {self.device}")

        if self.model is None:
            try:
                self.model = SentenceTransformer(
                    self.model_name,
                    device=self.device
                )
                logger.info("Embedding model loaded successfully")
            except Exception:
                logger.exception("Failed to load embedding model")
                raise

    @classmethod
    def from_config(cls, embedding_cfg: dict) -> "VectorEmbedder":
        return cls(
            model_name=embedding_cfg.get("model", DEFAULT_MODEL),
            device=embedding_cfg.get("device", "cpu")
        )

    # -------------------------------------------------
    # Single Embedding
    # -------------------------------------------------

    def embed(self, text: str) -> List[float]:

        if self.model is None:
            raise EmbeddingError("Embedding model not initialized")

        if not isinstance(text, str) or not text.strip():
            raise EmbeddingError("Cannot embed empty text")

        try:
            token_embeddings = self.model.encode(
                [text],
                output_value="token_embeddings"
            )[0]
        except Exception as exc:
            raise EmbeddingError(f"Embedding model failed: {exc}") from exc

        vector = l2_normalize(mean_pool(token_embeddings))
        return vector.astype(float).tolist()

    # -------------------------------------------------
    # Model Info
    # -------------------------------------------------

    @property
    def dimension(self) -> Optional[int]:
        if self.model is None:
            return None
        return self.model.get_sentence_embedding_dimension()

    def get_model_info(self):

        return {
            "model": self.model_name,
            "device": self.device,
            "dimension": self.dimension,
            "normalize": True,
            "pooling": "mean"
        }
