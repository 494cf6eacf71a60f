"""Narrative data stores."""

from book_question_analyzer.config import Settings, get_settings
from book_question_analyzer.storage.base import ChapterStore, EntityCatalog, EventStore, NarrativeStore

__all__ = ["ChapterStore", "EntityCatalog", "EventStore", "NarrativeStore", "open_store"]


def open_store(settings: Settings | None = None) -> NarrativeStore:
    """Open the store selected by ``storage_backend``."""
    settings = settings or get_settings()

    if settings.storage_backend == "neo4j":
        from book_question_analyzer.graph.store import open_graph_store

        return open_graph_store(settings=settings)

    from book_question_analyzer.storage.seeds import load_seed_store

    return load_seed_store(settings.seeds_dir)
