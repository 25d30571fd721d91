"""
Tests for CorsHeadersMiddleware.

Tests cover:
- CORS headers on every response, including unhandled-error 500s
- OPTIONS preflight short-circuit (route logic never runs)
- Custom origin
"""

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from ummah_api.core.middleware import ALLOWED_HEADERS, ALLOWED_METHODS, CorsHeadersMiddleware

EXPECTED_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, PUT, DELETE, OPTIONS",
    "access-control-allow-headers": "Origin, X-Requested-With, Content-Type, Accept, Authorization",
}


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def cors_client(calls: list[str]) -> TestClient:
    app = FastAPI()
    app.add_middleware(CorsHeadersMiddleware)

    @app.get("/items")
    async def items():
        calls.append("GET")
        return {"items": []}

    @app.options("/items")
    async def items_options():
        calls.append("OPTIONS")
        return {"handled": True}

    return TestClient(app)


class TestCorsHeaders:
    def test_defaults(self):
        assert ALLOWED_METHODS == ("GET", "POST", "PUT", "DELETE", "OPTIONS")
        assert ALLOWED_HEADERS == (
            "Origin",
            "X-Requested-With",
            "Content-Type",
            "Accept",
            "Authorization",
        )

    def test_headers_added_to_normal_response(self, cors_client: TestClient):
        response = cors_client.get("/items")

        assert response.status_code == 200
        assert response.json() == {"items": []}
        for name, value in EXPECTED_HEADERS.items():
            assert response.headers[name] == value

    def test_headers_added_to_not_found(self, cors_client: TestClient):
        response = cors_client.get("/missing")

        assert response.status_code == 404
        assert response.headers["access-control-allow-origin"] == "*"

    def test_custom_origin(self):
        app = FastAPI()
        app.add_middleware(CorsHeadersMiddleware, allow_origin="https://ummah.example")

        @app.get("/")
        async def root():
            return {}

        response = TestClient(app).get("/")
        assert response.headers["access-control-allow-origin"] == "https://ummah.example"


class TestPreflight:
    def test_options_short_circuits(self, cors_client: TestClient, calls: list[str]):
        response = cors_client.options("/items")

        assert response.status_code == 200
        assert response.content == b""
        assert calls == []
        for name, value in EXPECTED_HEADERS.items():
            assert response.headers[name] == value

    def test_options_on_unknown_path_is_200(self, cors_client: TestClient):
        assert cors_client.options("/anything/at/all").status_code == 200


class TestUnhandledErrors:
    @pytest.fixture
    def wrapped_client(self) -> TestClient:
        app = FastAPI()

        @app.exception_handler(Exception)
        async def generic_handler(request, exc):
            return JSONResponse(status_code=500, content={"error": "InternalServerError"})

        @app.get("/boom")
        async def boom():
            raise RuntimeError("unexpected")

        return TestClient(CorsHeadersMiddleware(app), raise_server_exceptions=False)

    def test_headers_added_to_generic_500(self, wrapped_client: TestClient):
        response = wrapped_client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"error": "InternalServerError"}
        for name, value in EXPECTED_HEADERS.items():
            assert response.headers[name] == value

    def test_preflight_when_wrapping_app(self, wrapped_client: TestClient):
        response = wrapped_client.options("/boom")

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
