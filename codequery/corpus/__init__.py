"""Corpus snapshot loading.

Usage:
    from codequery.corpus import load_corpus

    corpus = load_corpus(".codequery/corpus.json")
    corpus.entities("class")
"""

from .corpus import Corpus
from .loader import corpus_from_dict, load_corpus

__all__ = [
    "Corpus",
    "corpus_from_dict",
    "load_corpus",
]
