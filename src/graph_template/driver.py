"""Neo4j driver construction and the shared process-wide driver."""

import atexit
import re
import threading
from typing import Optional

from loguru import logger
from neo4j import Driver, GraphDatabase
from neo4j.exceptions import ServiceUnavailable

from .config import Neo4jSettingsModel, runtime_settings


def mask_uri(uri: str) -> str:
    """Mask sensitive parts of a URI for logging."""
    return re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", uri)


def mask_username(username: str) -> str:
    """Mask a username for logging."""
    if len(username) <= 2:
        return "***"
    return username[:2] + "*" * (len(username) - 2)


def create_neo4j_driver(settings: Neo4jSettingsModel) -> Driver:
    """Create and verify a new Neo4j driver using the provided settings."""
    if not settings.uri or not settings.user or not settings.password:
        raise ServiceUnavailable("Neo4j connection details are incomplete in settings.")

    logger.info(
        "Initializing Neo4j driver for URI: {} (user {})",
        mask_uri(settings.uri),
        mask_username(settings.user),
    )
    driver = GraphDatabase.driver(
        settings.uri,
        auth=(settings.user, settings.password),
        max_connection_lifetime=settings.max_connection_lifetime,
        max_connection_pool_size=settings.max_connection_pool_size,
        connection_acquisition_timeout=settings.connection_acquisition_timeout,
    )
    try:
        driver.verify_connectivity()
    except Exception:
        driver.close()
        raise
    logger.info("Neo4j driver initialized and connectivity verified.")
    return driver


class Neo4jDriverManager:
    """Thread-safe manager for the Neo4j driver."""

    def __init__(self, settings: Optional[Neo4jSettingsModel] = None) -> None:
        self._settings = settings
        self._driver: Optional[Driver] = None
        self._lock = threading.Lock()
        atexit.register(self.cleanup)

    def _create_driver(self) -> Driver:
        return create_neo4j_driver(self._settings or runtime_settings.neo4j)

    def get_driver(self) -> Driver:
        with self._lock:
            if self._driver is None:
                self._driver = self._create_driver()
            return self._driver

    def cleanup(self) -> None:
        with self._lock:
            if self._driver is not None:
                logger.info("Closing Neo4j driver.")
                self._driver.close()
                self._driver = None


driver_manager = Neo4jDriverManager()


def get_neo4j_driver() -> Driver:
    """Return a singleton Neo4j driver instance."""
    try:
        return driver_manager.get_driver()
    except ServiceUnavailable:
        raise
    except Exception as e:
        logger.error(f"Unexpected error obtaining Neo4j driver: {e}")
        raise


def close_neo4j_driver() -> None:
    """Close the Neo4j driver if it is open."""
    driver_manager.cleanup()
