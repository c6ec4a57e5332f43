"""Similarity retrieval."""

from src.retrieval.retriever import Retriever

__all__ = ["Retriever"]
