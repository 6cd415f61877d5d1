"""Tests for fetching Rego sources over HTTP."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from rego_loader.collect import fetch_remote_files
from rego_loader.exceptions import PolicySourceError

URL = "https://policies.example.com/main.rego"


class TestFetchRemoteFiles:
    """Tests for fetch_remote_files()."""

    def test_returns_body_keyed_by_url(self, deny_policy: str):
        """Given a successful response, maps the URL to the body text."""
        mock_response = MagicMock()
        mock_response.text = deny_policy
        mock_response.content = deny_policy.encode()

        with patch("httpx.Client") as mock_client:
            mock_client.return_value.__enter__.return_value.get.return_value = mock_response

            result = fetch_remote_files([URL])

        assert result == {URL: deny_policy}

    def test_passes_timeout(self):
        """Client is created with the configured timeout."""
        mock_response = MagicMock()
        mock_response.text = "package a\n"
        mock_response.content = b"package a\n"

        with patch("httpx.Client") as mock_client:
            mock_client.return_value.__enter__.return_value.get.return_value = mock_response

            fetch_remote_files([URL], timeout=5)

            assert mock_client.call_args[1]["timeout"] == 5

    def test_duplicate_urls_fetched_once(self):
        """Same URL twice is requested once."""
        mock_response = MagicMock()
        mock_response.text = "package a\n"
        mock_response.content = b"package a\n"

        with patch("httpx.Client") as mock_client:
            client_instance = mock_client.return_value.__enter__.return_value
            client_instance.get.return_value = mock_response

            fetch_remote_files([URL, URL])

            assert client_instance.get.call_count == 1

    def test_raises_on_http_error_status(self):
        """Given an error status, raises PolicySourceError with the code."""
        mock_response = MagicMock()
        mock_response.status_code = 404
        error = httpx.HTTPStatusError("Not Found", request=MagicMock(), response=mock_response)
        mock_response.raise_for_status.side_effect = error

        with patch("httpx.Client") as mock_client:
            mock_client.return_value.__enter__.return_value.get.return_value = mock_response

            with pytest.raises(PolicySourceError) as exc_info:
                fetch_remote_files([URL])

        assert exc_info.value.source == URL
        assert "HTTP 404" in str(exc_info.value)

    def test_raises_on_connection_error(self):
        """Given a connection failure, raises PolicySourceError."""
        with patch("httpx.Client") as mock_client:
            mock_client.return_value.__enter__.return_value.get.side_effect = httpx.ConnectError(
                "Connection refused"
            )

            with pytest.raises(PolicySourceError) as exc_info:
                fetch_remote_files([URL])

        assert "Connection refused" in str(exc_info.value)

    def test_no_urls(self):
        """Empty input yields an empty mapping."""
        with patch("httpx.Client"):
            assert fetch_remote_files([]) == {}
