"""
Unit tests for driver construction helpers.
Testing framework: pytest with the Neo4j ``GraphDatabase`` factory patched out.
"""

from unittest.mock import Mock, patch

import pytest
from neo4j import Driver
from neo4j.exceptions import ServiceUnavailable

from graph_template import driver as driver_module
from graph_template.config import Neo4jSettingsModel
from graph_template.driver import (
    Neo4jDriverManager,
    create_neo4j_driver,
    mask_uri,
    mask_username,
)


@pytest.fixture
def settings():
    return Neo4jSettingsModel(
        uri="bolt://localhost:7687", user="neo4j", password="secret", database="neo4j"
    )


@pytest.fixture
def mock_neo4j_driver():
    """Mock Neo4j GraphDatabase driver."""
    with patch("graph_template.driver.GraphDatabase.driver") as mock_driver:
        mock_instance = Mock(spec=Driver)
        mock_instance.verify_connectivity.return_value = None
        mock_driver.return_value = mock_instance
        yield mock_driver, mock_instance


class TestMasking:
    def test_mask_uri_hides_password(self):
        assert mask_uri("bolt://neo4j:secret@db:7687") == "bolt://neo4j:***@db:7687"

    def test_mask_uri_without_credentials(self):
        assert mask_uri("neo4j://localhost:7687") == "neo4j://localhost:7687"

    @pytest.mark.parametrize(
        "username, expected",
        [("ab", "***"), ("neo4j", "ne***"), ("", "***")],
    )
    def test_mask_username(self, username, expected):
        assert mask_username(username) == expected


class TestCreateDriver:
    def test_creates_and_verifies(self, settings, mock_neo4j_driver):
        factory, instance = mock_neo4j_driver

        driver = create_neo4j_driver(settings)

        assert driver is instance
        factory.assert_called_once_with(
            "bolt://localhost:7687",
            auth=("neo4j", "secret"),
            max_connection_lifetime=3600,
            max_connection_pool_size=50,
            connection_acquisition_timeout=60.0,
        )
        instance.verify_connectivity.assert_called_once()

    def test_incomplete_settings(self, settings, mock_neo4j_driver):
        factory, _ = mock_neo4j_driver
        settings.password = ""

        with pytest.raises(ServiceUnavailable):
            create_neo4j_driver(settings)
        factory.assert_not_called()

    def test_connectivity_failure_propagates(self, settings, mock_neo4j_driver):
        _, instance = mock_neo4j_driver
        instance.verify_connectivity.side_effect = ServiceUnavailable("down")

        with pytest.raises(ServiceUnavailable):
            create_neo4j_driver(settings)
        instance.close.assert_called_once()


class TestDriverManager:
    def test_driver_is_cached(self, settings, mock_neo4j_driver):
        factory, instance = mock_neo4j_driver
        manager = Neo4jDriverManager(settings)

        assert manager.get_driver() is instance
        assert manager.get_driver() is instance
        factory.assert_called_once()

    def test_cleanup_closes_driver(self, settings, mock_neo4j_driver):
        factory, instance = mock_neo4j_driver
        manager = Neo4jDriverManager(settings)
        manager.get_driver()

        manager.cleanup()
        manager.cleanup()

        instance.close.assert_called_once()
        manager.get_driver()
        assert factory.call_count == 2

    def test_failed_verification_does_not_cache(self, settings, mock_neo4j_driver):
        factory, instance = mock_neo4j_driver
        instance.verify_connectivity.side_effect = [ServiceUnavailable("down"), None]
        manager = Neo4jDriverManager(settings)

        with pytest.raises(ServiceUnavailable):
            manager.get_driver()
        assert manager.get_driver() is instance

        assert factory.call_count == 2
        instance.close.assert_called_once()

    def test_module_helpers_use_shared_manager(self, settings, mock_neo4j_driver):
        _, instance = mock_neo4j_driver
        manager = Neo4jDriverManager(settings)

        with patch.object(driver_module, "driver_manager", manager):
            assert driver_module.get_neo4j_driver() is instance
            driver_module.close_neo4j_driver()

        instance.close.assert_called_once()
