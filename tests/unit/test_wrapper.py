"""Unit tests for the endpoint wrapper: envelopes, call shapes, errors and audit logging."""

from __future__ import annotations

import json
import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.api.wrapper import HandlerKind
from app.api.wrapper import wrap_endpoint
from app.core.errors import NotFoundError
from app.core.errors import register_error_handlers
from app.core.request import ApiRequest
from app.core.request import ApiResponse
from app.db.base import Database

WRAPPER_LOGGER = "app.api.wrapper"


@wrap_endpoint("Test#single", "items")
def single(request: ApiRequest, session: Session) -> dict:
    return {"id": int(request.params["id"]), "q": request.query.get("q")}


@wrap_endpoint("Test#many", "items", kind=HandlerKind.STORE_ONLY)
def many(session: Session) -> list[dict]:
    assert isinstance(session, Session)
    return [{"id": 1}, {"id": 2}]


@wrap_endpoint("Test#raw")
def raw(request: ApiRequest, session: Session) -> dict:
    return {"ok": True}


@wrap_endpoint("Test#created", "items")
def created(request: ApiRequest, session: Session) -> tuple[dict, int]:
    return {"id": 7}, 201


@wrap_endpoint("Test#headers", "items", kind=HandlerKind.NEEDS_RESPONSE)
def with_headers(request: ApiRequest, response: ApiResponse, session: Session) -> dict:
    response.status_code = 202
    response.headers["X-Job-Count"] = "1"
    return {"id": 1}


@wrap_endpoint("Test#mutate", "items")
def mutate(request: ApiRequest, session: Session) -> dict:
    request.body["items"][0]["name"] = "changed"
    request.body["injected"] = True
    return request.body["items"][0]


@wrap_endpoint("Test#missing", "items")
def missing(request: ApiRequest, session: Session) -> dict:
    raise NotFoundError("Item not found with id=4")


@wrap_endpoint("Test#crash", "items")
def crash(request: ApiRequest, session: Session) -> dict:
    raise KeyError("boom")


@pytest.fixture
def wrapper_client(database: Database) -> TestClient:
    app = FastAPI()
    app.state.database = database
    register_error_handlers(app)
    app.add_api_route("/items", many, methods=["GET"])
    app.add_api_route("/items/{id}", single, methods=["GET"])
    app.add_api_route("/raw", raw, methods=["GET"])
    app.add_api_route("/created", created, methods=["POST"])
    app.add_api_route("/headers", with_headers, methods=["GET"])
    app.add_api_route("/mutate", mutate, methods=["POST"])
    app.add_api_route("/missing", missing, methods=["GET"])
    app.add_api_route("/crash", crash, methods=["GET"])
    return TestClient(app, raise_server_exceptions=False)


def _wrapper_messages(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [record.getMessage() for record in caplog.records if record.name == WRAPPER_LOGGER]


def _snapshot(message: str) -> dict:
    return json.loads(message.split(" ", 2)[2])


def test_single_result_is_wrapped_in_list(wrapper_client: TestClient) -> None:
    response = wrapper_client.get("/items/5?q=abc")

    assert response.status_code == 200
    assert response.json() == {"items": [{"id": 5, "q": "abc"}]}


def test_list_result_is_not_wrapped_twice(wrapper_client: TestClient) -> None:
    response = wrapper_client.get("/items")

    assert response.json() == {"items": [{"id": 1}, {"id": 2}]}


def test_result_without_wrap_key_is_returned_as_is(wrapper_client: TestClient) -> None:
    assert wrapper_client.get("/raw").json() == {"ok": True}


def test_handler_status_code_is_used(wrapper_client: TestClient) -> None:
    response = wrapper_client.post("/created")

    assert response.status_code == 201
    assert response.json() == {"items": [{"id": 7}]}


def test_response_aware_handler_sets_status_and_headers(wrapper_client: TestClient) -> None:
    response = wrapper_client.get("/headers")

    assert response.status_code == 202
    assert response.headers["X-Job-Count"] == "1"


def test_domain_errors_are_translated(wrapper_client: TestClient) -> None:
    response = wrapper_client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"errors": [{"code": 404, "message": "Item not found with id=4"}]}


def test_unexpected_errors_are_translated_to_500(wrapper_client: TestClient) -> None:
    response = wrapper_client.get("/crash")

    assert response.status_code == 500
    assert response.json() == {"errors": [{"code": 500, "message": "Internal server error"}]}


def test_malformed_json_is_a_bad_request(wrapper_client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=WRAPPER_LOGGER)

    response = wrapper_client.post(
        "/mutate",
        content=b'{"items": [',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["errors"][0]["code"] == 400
    assert payload["errors"][0]["message"].startswith("Invalid JSON body")
    assert _wrapper_messages(caplog) == []


def test_each_call_logs_one_enter_and_one_exit(
    wrapper_client: TestClient,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger=WRAPPER_LOGGER)

    wrapper_client.get("/items/5")

    messages = _wrapper_messages(caplog)
    assert len(messages) == 2
    assert messages[0].startswith("ENTER Test#single ")
    assert messages[1].startswith("EXIT Test#single ")
    exit_snapshot = _snapshot(messages[1])
    assert exit_snapshot["params"] == {"id": "5"}
    assert exit_snapshot["statusCode"] == 200
    assert exit_snapshot["response"] == {"items": [{"id": 5, "q": None}]}


def test_failures_log_one_exit_with_the_error_payload(
    wrapper_client: TestClient,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger=WRAPPER_LOGGER)

    wrapper_client.get("/crash")

    records = [record for record in caplog.records if record.name == WRAPPER_LOGGER]
    assert [record.levelno for record in records] == [logging.INFO, logging.ERROR]
    assert records[1].exc_info is not None
    exit_snapshot = _snapshot(records[1].getMessage())
    assert exit_snapshot["statusCode"] == 500
    assert exit_snapshot["response"]["errors"][0]["code"] == 500


def test_client_errors_log_exit_as_warning(wrapper_client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=WRAPPER_LOGGER)

    wrapper_client.get("/missing")

    records = [record for record in caplog.records if record.name == WRAPPER_LOGGER]
    assert [record.levelno for record in records] == [logging.INFO, logging.WARNING]


def test_logged_snapshot_is_not_changed_by_handler(
    wrapper_client: TestClient,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger=WRAPPER_LOGGER)

    response = wrapper_client.post("/mutate", json={"items": [{"name": "original"}]})

    assert response.json() == {"items": [{"name": "changed"}]}
    exit_snapshot = _snapshot(_wrapper_messages(caplog)[1])
    assert exit_snapshot["body"] == {"items": [{"name": "original"}]}


def test_signature_must_be_a_string() -> None:
    with pytest.raises(TypeError, match="signature should be a string"):
        wrap_endpoint(123)  # type: ignore[arg-type]


def test_handler_must_be_callable() -> None:
    with pytest.raises(TypeError, match="fn should be callable"):
        wrap_endpoint("Test#broken")("not a function")  # type: ignore[arg-type]
