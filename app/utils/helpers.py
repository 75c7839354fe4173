from collections.abc import MutableMapping
from datetime import UTC, datetime
from time import monotonic
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute, Match, Route

_PROCESS_START = monotonic()


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def utc_timestamp() -> str:
    """Return the current UTC time in ISO-8601 format."""
    return datetime.now(UTC).isoformat()


def uptime_seconds() -> float:
    """Seconds elapsed since this module was first imported."""
    return round(monotonic() - _PROCESS_START, 3)


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def escape_markup(value: str) -> str:
    """Escape angle brackets so the value cannot inject markup."""
    return value.replace("<", "&lt;").replace(">", "&gt;")
