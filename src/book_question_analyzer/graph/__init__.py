"""Neo4j graph storage."""

from .connection import check_neo4j_connection, get_driver, init_schema
from .store import open_graph_store
from .writer import GraphWriter

__all__ = ["check_neo4j_connection", "get_driver", "init_schema", "open_graph_store", "GraphWriter"]
