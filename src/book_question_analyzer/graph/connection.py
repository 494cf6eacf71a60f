"""Neo4j connection management."""

from neo4j import Driver, GraphDatabase
from neo4j.exceptions import AuthError, ServiceUnavailable

from book_question_analyzer.config import Settings, get_settings


def get_driver(settings: Settings | None = None) -> Driver | None:
    """Get a Neo4j driver instance."""
    settings = settings or get_settings()

    try:
        driver = GraphDatabase.driver(
            settings.neo4j_uri,
            auth=(settings.neo4j_user, settings.neo4j_password),
            connection_timeout=settings.neo4j_timeout,
        )
        return driver
    except ValueError:
        # Malformed URI or auth
        return None


def check_neo4j_connection(settings: Settings | None = None) -> bool:
    """Check if Neo4j is reachable and credentials are valid."""
    driver = get_driver(settings)
    if not driver:
        return False

    try:
        with driver.session() as session:
            session.run("RETURN 1")
        return True
    except (ServiceUnavailable, AuthError):
        return False
    finally:
        driver.close()


def init_schema(driver: Driver) -> None:
    """Create uniqueness constraints and name indexes if missing."""
    constraints = [
        "CREATE CONSTRAINT char_id IF NOT EXISTS FOR (c:Character) REQUIRE c.id IS UNIQUE",
        "CREATE CONSTRAINT place_id IF NOT EXISTS FOR (p:Place) REQUIRE p.id IS UNIQUE",
        "CREATE CONSTRAINT object_id IF NOT EXISTS FOR (o:Object) REQUIRE o.id IS UNIQUE",
        "CREATE CONSTRAINT generation_id IF NOT EXISTS FOR (g:Generation) REQUIRE g.id IS UNIQUE",
        "CREATE CONSTRAINT event_id IF NOT EXISTS FOR (e:Event) REQUIRE e.id IS UNIQUE",
        "CREATE CONSTRAINT chapter_number IF NOT EXISTS FOR (c:Chapter) REQUIRE c.number IS UNIQUE",
    ]

    indexes = [
        "CREATE INDEX char_name IF NOT EXISTS FOR (c:Character) ON (c.name)",
        "CREATE INDEX place_name IF NOT EXISTS FOR (p:Place) ON (p.name)",
        "CREATE INDEX object_name IF NOT EXISTS FOR (o:Object) ON (o.name)",
    ]

    with driver.session() as session:
        for statement in constraints + indexes:
            session.run(statement)
