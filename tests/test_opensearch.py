"""
Tests for the OpenSearch connection helpers
"""
import logging
from unittest.mock import patch

import pytest

from core.config import get_settings
from core import opensearch
from core.lifespan import log_settings


@pytest.fixture(name="fresh_connection")
def fresh_connection_fixture(monkeypatch):
    """Clear cached settings and client before and after each test"""
    for name in ("OPENSEARCH_HOST", "OPENSEARCH_PORT", "OPENSEARCH_USER",
                 "OPENSEARCH_PASSWORD", "OPENSEARCH_USE_SSL",
                 "OPENSEARCH_VERIFY_CERTS", "ENV_SECRETS", "FILES_INDEX"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    opensearch.reset_opensearch_client()
    yield monkeypatch
    get_settings.cache_clear()
    opensearch.reset_opensearch_client()


def test_no_host_no_client(fresh_connection):
    """Without OPENSEARCH_HOST there is no client"""
    assert opensearch.get_opensearch_client() is None


@patch("core.opensearch.OpenSearch")
def test_client_from_settings(mock_opensearch, fresh_connection):
    """The client is built from settings and cached"""
    fresh_connection.setenv("OPENSEARCH_HOST", "search.example.org")
    fresh_connection.setenv("OPENSEARCH_PORT", "9201")
    fresh_connection.setenv("OPENSEARCH_USER", "admin")
    fresh_connection.setenv("OPENSEARCH_PASSWORD", "secret")

    client = opensearch.get_opensearch_client()
    assert client is mock_opensearch.return_value
    assert opensearch.get_opensearch_client() is client
    mock_opensearch.assert_called_once()

    kwargs = mock_opensearch.call_args.kwargs
    assert kwargs["hosts"] == [{"host": "search.example.org", "port": 9201}]
    assert kwargs["http_auth"] == ("admin", "secret")
    assert kwargs["use_ssl"] is True
    assert kwargs["verify_certs"] is False
    assert kwargs["http_compress"] is True


@patch("core.opensearch.OpenSearch")
def test_client_without_credentials(mock_opensearch, fresh_connection):
    """Basic auth is only used when both user and password are set"""
    fresh_connection.setenv("OPENSEARCH_HOST", "localhost")
    fresh_connection.setenv("OPENSEARCH_USER", "admin")

    opensearch.get_opensearch_client()
    assert mock_opensearch.call_args.kwargs["http_auth"] is None
    assert mock_opensearch.call_args.kwargs["hosts"][0]["port"] == 9200


def test_init_indexes(fresh_connection, opensearch_client, caplog):
    """Missing indexes are created, existing ones left alone"""
    fresh_connection.setenv("FILES_INDEX", "ftp_files")

    with caplog.at_level(logging.INFO):
        opensearch.init_indexes(opensearch_client)
        assert opensearch_client.indices.exists(index="ftp_files")
        assert "Index 'ftp_files' created successfully." in caplog.text

        opensearch.init_indexes(opensearch_client)
        assert "Index 'ftp_files' already exists." in caplog.text


def test_init_indexes_given_list(fresh_connection, opensearch_client):
    """An explicit list of indexes replaces the configured one"""
    opensearch.init_indexes(opensearch_client, ["ftp_archive"])
    assert opensearch_client.indices.exists(index="ftp_archive")
    assert not opensearch_client.indices.exists(index="files")


def test_init_indexes_without_client(fresh_connection):
    """Nothing to do without a client"""
    opensearch.init_indexes(None)


def test_log_settings_masks_password(fresh_connection, caplog):
    """Passwords are never written to the log"""
    fresh_connection.setenv("OPENSEARCH_PASSWORD", "hunter2")

    with caplog.at_level(logging.INFO):
        log_settings(get_settings())

    assert "hunter2" not in caplog.text
    assert "OPENSEARCH_PASSWORD: *****" in caplog.text
