# src/calphadg/embedding/__init__.py

"""Classical multidimensional scaling of distance matrices into 3D."""

from calphadg.embedding.embedder import EMBEDDING_DIM, Embedder, ScalingMethod

__all__ = [
    "Embedder",
    "ScalingMethod",
    "EMBEDDING_DIM",
]
