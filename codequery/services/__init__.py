"""Service layer: corpus contexts and query dispatch."""

from codequery.services.corpus_registry import (
    CorpusContext,
    CorpusRegistry,
)
from codequery.services.query_service import (
    FilterArgs,
    QueryService,
)

__all__ = [
    # Corpus Registry
    "CorpusContext",
    "CorpusRegistry",
    # Query Service
    "FilterArgs",
    "QueryService",
]
