"""Tests for documents portal retrieval."""

from unittest.mock import MagicMock, patch

import requests

from oaslint.config import PortalConfig
from oaslint.utils import fetch_repo_map, fetch_spec_from_portal

REPOSITORIES_YAML = """\
services:
  - Orders API: orders-repo
  - Billing API: billing-repo
"""


def _response(status_code=200, text="", json_data=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


class TestFetchRepoMap:
    """Test fetch_repo_map."""

    def test_finds_service_entry(self):
        config = PortalConfig(baseUrl="https://docs.example.com")
        with patch("oaslint.utils.portal.requests.get", return_value=_response(text=REPOSITORIES_YAML)) as mock_get:
            entry = fetch_repo_map("Billing API", config)

        assert entry == {"Billing API": "billing-repo"}
        mock_get.assert_called_once_with("https://docs.example.com/gitea/repositories.yaml", timeout=10.0)

    def test_unknown_service(self):
        with patch("oaslint.utils.portal.requests.get", return_value=_response(text=REPOSITORIES_YAML)):
            assert fetch_repo_map("Shipping API") is None

    def test_http_error(self):
        with patch("oaslint.utils.portal.requests.get", return_value=_response(status_code=503)):
            assert fetch_repo_map("Orders API") is None

    def test_connection_error(self):
        with patch("oaslint.utils.portal.requests.get", side_effect=requests.ConnectionError("refused")):
            assert fetch_repo_map("Orders API") is None

    def test_malformed_map(self):
        with patch("oaslint.utils.portal.requests.get", return_value=_response(text="repos: []\n")):
            assert fetch_repo_map("Orders API") is None


class TestFetchSpecFromPortal:
    """Test fetch_spec_from_portal."""

    def test_returns_document_text(self):
        response = _response(json_data={"yaml": "openapi: 3.0.0\n"})
        with patch("oaslint.utils.portal.requests.get", return_value=response) as mock_get:
            text = fetch_spec_from_portal("orders-repo", "api/orders.yaml")

        assert text == "openapi: 3.0.0\n"
        assert mock_get.call_args.args == ("http://localhost:3000/api/gitea",)
        assert mock_get.call_args.kwargs["params"] == {"repo": "orders-repo", "path": "api/orders.yaml"}

    def test_error_response(self, caplog):
        response = _response(status_code=404, json_data={"error": "File not found"})
        with patch("oaslint.utils.portal.requests.get", return_value=response):
            assert fetch_spec_from_portal("orders-repo", "missing.yaml") is None

        assert "File not found" in caplog.text

    def test_non_json_response(self):
        response = _response()
        response.json.side_effect = ValueError("not json")
        with patch("oaslint.utils.portal.requests.get", return_value=response):
            assert fetch_spec_from_portal("orders-repo", "api/orders.yaml") is None

    def test_missing_yaml_field(self):
        with patch("oaslint.utils.portal.requests.get", return_value=_response(json_data={"other": 1})):
            assert fetch_spec_from_portal("orders-repo", "api/orders.yaml") is None
