"""Unit tests for error translation and the shared error envelope handlers."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import APIError
from app.core.errors import BadRequestError
from app.core.errors import NotFoundError
from app.core.errors import SchemaDefinitionError
from app.core.errors import ValidationError
from app.core.errors import handle_error
from app.core.errors import register_error_handlers
from app.core.validation import ErrorCode
from app.core.validation import make_error


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError("Job not found with id=3")

    @app.get("/bad-request")
    def bad_request() -> None:
        raise BadRequestError("Invalid JSON body")

    @app.get("/teapot")
    def teapot() -> None:
        raise StarletteHTTPException(status_code=418, detail="I'm a teapot")

    @app.get("/crash")
    def crash() -> None:
        raise RuntimeError("connection refused to 10.0.0.5")

    return TestClient(app, raise_server_exceptions=False)


def test_validation_errors_keep_every_item() -> None:
    error = ValidationError(
        [
            make_error(ErrorCode.MISSING_FIELD, "job_name__c"),
            make_error(ErrorCode.MAX_LENGTH, "phone__c", max_length=40),
        ]
    )

    status_code, payload = handle_error(error)

    assert status_code == 400
    assert payload == {
        "errors": [
            {"code": 1000, "message": "Missing field", "field": "job_name__c"},
            {"code": 1102, "message": "String is too long", "field": "phone__c", "max_length": 40},
        ]
    }


def test_not_found_uses_its_message() -> None:
    assert handle_error(NotFoundError("Job not found with id=9")) == (
        404,
        {"errors": [{"code": 404, "message": "Job not found with id=9"}]},
    )


def test_generic_errors_default_to_500_without_leaking_details() -> None:
    assert handle_error(RuntimeError("password=secret")) == (
        500,
        {"errors": [{"code": 500, "message": "Internal server error"}]},
    )
    assert handle_error(SchemaDefinitionError("Unknown type: geo"))[0] == 500


def test_generic_errors_keep_their_status_code() -> None:
    error = ConnectionError("upstream said no")
    error.status_code = 409  # type: ignore[attr-defined]

    assert handle_error(error) == (409, {"errors": [{"code": 409, "message": "upstream said no"}]})


def test_api_error_keeps_custom_status() -> None:
    assert handle_error(APIError(status_code=409, message="Conflict")) == (
        409,
        {"errors": [{"code": 409, "message": "Conflict"}]},
    )


def test_not_found_errors_use_shared_envelope() -> None:
    client = _build_client()

    response = client.get("/not-found")

    assert response.status_code == 404
    assert response.json() == {"errors": [{"code": 404, "message": "Job not found with id=3"}]}


def test_bad_request_errors_use_shared_envelope() -> None:
    client = _build_client()

    response = client.get("/bad-request")

    assert response.status_code == 400
    assert response.json() == {"errors": [{"code": 400, "message": "Invalid JSON body"}]}


def test_unknown_routes_are_reported_as_missing_uri() -> None:
    client = _build_client()

    response = client.get("/missing?page=2")

    assert response.status_code == 404
    assert response.json() == {"errors": [{"code": 404, "message": "URI GET /missing?page=2 does not exist."}]}


def test_unsupported_methods_are_reported_as_missing_uri() -> None:
    client = _build_client()

    response = client.post("/not-found")

    assert response.status_code == 404
    assert response.json()["errors"][0]["message"] == "URI POST /not-found does not exist."


def test_other_http_errors_are_wrapped() -> None:
    client = _build_client()

    response = client.get("/teapot")

    assert response.status_code == 418
    assert response.json() == {"errors": [{"code": 418, "message": "I'm a teapot"}]}


def test_unhandled_errors_become_internal_errors() -> None:
    client = _build_client()

    response = client.get("/crash")

    assert response.status_code == 500
    assert response.json() == {"errors": [{"code": 500, "message": "Internal server error"}]}
