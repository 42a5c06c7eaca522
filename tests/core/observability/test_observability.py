from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient
from structlog.contextvars import get_contextvars

from core.observability.observability import RequestContextMiddleware


async def bound(request: Request):
    request.state.client_id = "client-1"
    return JSONResponse(get_contextvars())


def make_client() -> TestClient:
    app = Starlette(routes=[Route("/bound", bound)])
    app.add_middleware(RequestContextMiddleware)
    return TestClient(app)


def test_request_context_echoes_supplied_request_id():
    res = make_client().get("/bound", headers={"X-Request-ID": "rid-1"})

    assert res.headers["x-request-id"] == "rid-1"
    assert res.json() == {"request_id": "rid-1", "method": "GET", "path": "/bound"}


def test_request_context_generates_request_id():
    res = make_client().get("/bound")

    assert res.headers["x-request-id"]
    assert res.json()["request_id"] == res.headers["x-request-id"]
