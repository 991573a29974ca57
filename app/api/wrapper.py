"""Endpoint wrapper shared by every resource handler.

``wrap_endpoint`` turns a plain synchronous handler into a FastAPI endpoint
that:

- logs one ``ENTER`` line with a snapshot of params, query and body,
- acquires the database session and calls the handler in the threadpool,
- wraps the result under the resource key (always as a list),
- translates failures with :func:`app.core.errors.handle_error`,
- logs one ``EXIT`` line with the response and status code.

Handlers return either a result or a ``(result, status_code)`` tuple.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any
import copy
import json
import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from app.core.errors import BadRequestError
from app.core.errors import handle_error
from app.core.request import ApiRequest
from app.core.request import ApiResponse
from app.db.base import Database

logger = logging.getLogger(__name__)


class HandlerKind(Enum):
    """Call shape of a wrapped handler, chosen when it is registered."""

    NEEDS_RESPONSE = "needs_response"  # handler(request, response, session)
    NEEDS_REQUEST = "needs_request"  # handler(request, session)
    STORE_ONLY = "store_only"  # handler(session)


def _dump(snapshot: dict[str, Any]) -> str:
    return json.dumps(snapshot, default=str)


async def read_request(request: Request) -> ApiRequest:
    """Decode a Starlette request; a body that is not valid JSON is a bad request."""
    raw = await request.body()
    body: Any = {}
    if raw.strip():
        try:
            body = json.loads(raw)
        except ValueError as exc:
            raise BadRequestError(f"Invalid JSON body: {exc}") from exc

    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return ApiRequest(
        method=request.method,
        url=url,
        params=dict(request.path_params),
        query=dict(request.query_params),
        body=body,
    )


def _split_result(result: Any) -> tuple[Any, int | None]:
    if isinstance(result, tuple) and len(result) == 2 and isinstance(result[1], int):
        return result[0], result[1]
    return result, None


def _serialize(result: Any, response_model: type[BaseModel] | None) -> Any:
    def convert(item: Any) -> Any:
        if response_model is None or isinstance(item, (dict, BaseModel)):
            return item
        return response_model.model_validate(item)

    if isinstance(result, list):
        return [convert(item) for item in result]
    return convert(result)


def wrap_endpoint(
    signature: str,
    wrap_property_name: str | None = None,
    *,
    kind: HandlerKind = HandlerKind.NEEDS_REQUEST,
    response_model: type[BaseModel] | None = None,
) -> Callable[[Callable[..., Any]], Callable[[Request], Any]]:
    """Decorate a handler as a logged, error-handled JSON endpoint.

    ``signature`` names the handler in log lines (e.g. ``"Job#show"``).
    ``response_model`` converts ORM results before they are encoded.
    """
    if not isinstance(signature, str):
        raise TypeError("signature should be a string")
    if not isinstance(kind, HandlerKind):
        raise TypeError("kind should be a HandlerKind")

    def decorator(fn: Callable[..., Any]) -> Callable[[Request], Any]:
        if not callable(fn):
            raise TypeError("fn should be callable")

        def invoke(database: Database, api_request: ApiRequest, api_response: ApiResponse) -> tuple[Any, int | None]:
            with database.session() as session:
                if kind is HandlerKind.NEEDS_RESPONSE:
                    result = fn(api_request, api_response, session)
                elif kind is HandlerKind.NEEDS_REQUEST:
                    result = fn(api_request, session)
                else:
                    result = fn(session)
                result, status_code = _split_result(result)
                # serialize while the session is still open
                return jsonable_encoder(_serialize(result, response_model)), status_code

        async def endpoint(request: Request) -> JSONResponse:
            api_request = await read_request(request)
            snapshot: dict[str, Any] = {
                "body": copy.deepcopy(api_request.body),
                "params": dict(api_request.params),
                "query": copy.deepcopy(api_request.query),
                "url": api_request.url,
            }
            logger.info("ENTER %s %s", signature, _dump(snapshot))

            api_response = ApiResponse()
            database: Database = request.app.state.database
            try:
                result, status_code = await run_in_threadpool(invoke, database, api_request, api_response)
            except Exception as error:
                status_code, payload = handle_error(error)
                snapshot["response"] = payload
                snapshot["statusCode"] = status_code
                if status_code >= 500:
                    logger.error("EXIT %s %s", signature, _dump(snapshot), exc_info=error)
                else:
                    logger.warning("EXIT %s %s", signature, _dump(snapshot))
                return JSONResponse(status_code=status_code, content=payload, headers=api_response.headers)

            if wrap_property_name:
                api_result: Any = {wrap_property_name: result if isinstance(result, list) else [result]}
            else:
                api_result = result
            status_code = status_code or api_response.status_code or 200
            snapshot["response"] = api_result
            snapshot["statusCode"] = status_code
            logger.info("EXIT %s %s", signature, _dump(snapshot))
            return JSONResponse(status_code=status_code, content=api_result, headers=api_response.headers)

        # no functools.wraps: FastAPI must see endpoint's own (request) signature
        endpoint.__name__ = fn.__name__
        endpoint.__qualname__ = fn.__qualname__
        endpoint.__doc__ = fn.__doc__
        endpoint.handler = fn  # type: ignore[attr-defined]
        return endpoint

    return decorator
