# app/db/neo4j.py
import logging
from typing import Optional

from neo4j import Driver, GraphDatabase

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

# Process-wide driver, set by init_driver() before the app starts serving
driver: Optional[Driver] = None


def init_driver(config: Settings = settings) -> Optional[Driver]:
    """Create the shared driver and check that the database answers.

    A database that cannot be reached is logged and leaves the driver
    unset, so the API still starts and data endpoints report errors.
    """
    global driver
    candidate = None
    try:
        candidate = GraphDatabase.driver(
            config.neo4j_uri,
            auth=(config.neo4j_user, config.neo4j_password),
            max_connection_lifetime=30 * 60,  # 30 minutes
            max_connection_pool_size=50,
            connection_acquisition_timeout=30,  # seconds
        )
        candidate.verify_connectivity()
    except Exception as e:
        logger.error(f"Could not connect to Neo4j at {config.neo4j_uri}: {e}")
        if candidate is not None:
            candidate.close()
        logger.error("Server will start without database connection")
        driver = None
        return None

    driver = candidate
    logger.info(f"Connected to Neo4j at {config.neo4j_uri}")
    ensure_constraints(config.neo4j_database)
    return driver


def ensure_constraints(database: str = settings.neo4j_database) -> None:
    """Create the uniqueness constraint on book identifiers if missing."""
    if driver is None:
        return
    try:
        with driver.session(database=database) as session:
            session.run(
                "CREATE CONSTRAINT book_id_unique IF NOT EXISTS "
                "FOR (b:Book) REQUIRE b.id IS UNIQUE"
            ).consume()
    except Exception as e:
        logger.error(f"Error creating Book.id constraint: {e}")


def get_driver() -> Optional[Driver]:
    return driver


def check_connection() -> bool:
    """Return True when the database answers a trivial query."""
    if driver is None:
        return False
    try:
        with driver.session(database=settings.neo4j_database) as session:
            result = session.run("RETURN 1 AS test")
            return result.single()["test"] == 1
    except Exception as e:
        logger.error(f"Error in connection check: {e}")
        return False


def close_driver() -> None:
    """Close the driver when the application shuts down."""
    global driver
    if driver is not None:
        driver.close()
        driver = None
        logger.info("Neo4j driver closed")
