"""Unit tests for the backend HTTP client."""

import json

import pytest
import requests

from backend_client import (
    BackendClient,
    BackendHTTPError,
    BackendResponseError,
    BackendTransportError,
)


def test_client_initialization(http_session):
    client = BackendClient(base_url="http://backend.test/", timeout=5, session=http_session)

    assert client.base_url == "http://backend.test"
    assert client.timeout == 5
    assert client.session is http_session
    assert http_session.headers["Content-Type"] == "application/json"


def test_list_customers(client, http_session, make_response):
    http_session.request.return_value = make_response(json_body={"customers": ["정우성", "김철수"]})

    assert client.list_customers() == ["정우성", "김철수"]
    http_session.request.assert_called_once_with("GET", "http://backend.test/customers", timeout=None)


def test_list_customers_missing_key_is_empty(client, http_session, make_response):
    http_session.request.return_value = make_response(json_body={"items": ["x"]})

    assert client.list_customers() == []


def test_http_error_carries_status_and_body(client, http_session, make_response):
    http_session.request.return_value = make_response(
        status_code=500, text="internal error", reason="Internal Server Error"
    )

    with pytest.raises(BackendHTTPError) as exc_info:
        client.list_customers()

    error = exc_info.value
    assert error.status_code == 500
    assert error.body == "internal error"
    assert str(error) == "500 Internal Server Error: internal error"


def test_transport_error_uses_exception_message(client, http_session):
    http_session.request.side_effect = requests.ConnectionError("Connection refused")

    with pytest.raises(BackendTransportError, match="Connection refused"):
        client.run_analysis({"customer_name": "정우성", "llm_model": "ollama"})


def test_invalid_json_body(client, http_session, make_response):
    http_session.request.return_value = make_response(
        json_body=json.JSONDecodeError("Expecting value", "<html>", 0)
    )

    with pytest.raises(BackendResponseError):
        client.list_customers()


def test_run_analysis_posts_json_and_returns_body(client, http_session, make_response):
    payload = {"result": {"draft": {"risk_score": 0.5}}}
    http_session.request.return_value = make_response(json_body=payload)
    body = {"customer_name": "정우성", "llm_model": "gpt5", "use_cache": False}

    assert client.run_analysis(body) == payload
    http_session.request.assert_called_once_with(
        "POST", "http://backend.test/run", timeout=None, json=body
    )
