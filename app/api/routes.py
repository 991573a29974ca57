"""Versioned route table.

Each entry has the form ``"VERB /path": "Controller#action"`` and is mounted
under ``/<version>``. Path parameters use FastAPI's ``{name}`` syntax.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import ModuleType

from fastapi import APIRouter

from app.api import jobs

ROUTES: dict[str, dict[str, str]] = {
    "1.0": {
        "GET /jobs": "Job#index",
        "GET /jobs/{id}": "Job#show",
        "POST /jobs": "Job#create",
        "PUT /jobs/{id}": "Job#update",
        "DELETE /jobs/{id}": "Job#remove",
    },
}

CONTROLLERS: dict[str, ModuleType] = {
    "Job": jobs,
}


def build_router(
    routes: Mapping[str, Mapping[str, str]] = ROUTES,
    controllers: Mapping[str, ModuleType] = CONTROLLERS,
) -> APIRouter:
    """Mount every route of every version on a new router."""
    router = APIRouter()
    for version, table in routes.items():
        for route, target in table.items():
            method, path = route.split(" ", 1)
            controller_name, action = target.split("#", 1)
            endpoint = getattr(controllers[controller_name], action)
            router.add_api_route(
                f"/{version}{path}",
                endpoint,
                methods=[method.upper()],
                name=target,
                tags=[controller_name.lower()],
            )
    return router
