"""Tests for the transform router helpers and dependencies."""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from imgcache.api.dependencies import get_transform_service
from imgcache.api.exception_handlers import register_exception_handlers
from imgcache.api.routers.transform import raw_path_source, read_limited_body
from imgcache.domain.exceptions import BadRequestError


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.post("/limited")
    async def limited(request: Request):
        body = await read_limited_body(request, 16)
        return {"size": len(body)}

    @app.get("/service")
    async def service(request: Request):
        get_transform_service(request)
        return {}

    return TestClient(app)


class TestReadLimitedBody:
    def test_within_limit(self, client: TestClient):
        assert client.post("/limited", content=b"x" * 16).json() == {"size": 16}

    def test_over_limit(self, client: TestClient):
        response = client.post("/limited", content=b"x" * 17)
        assert response.status_code == 400
        assert response.json()["reason"] == BadRequestError.default_message


def make_request(path: str, raw_path: bytes | None, query_string: bytes = b"") -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": path,
        "query_string": query_string,
        "headers": [],
    }
    if raw_path is not None:
        scope["raw_path"] = raw_path
    return Request(scope)


class TestRawPathSource:
    def test_keeps_percent_escapes(self):
        request = make_request(
            "/https://x/a b/c.png", b"/https://x/a%20b%2Fc.png", b"q=%26"
        )
        assert raw_path_source(request) == "https://x/a%20b%2Fc.png?q=%26"

    def test_query_left_on_raw_path_is_not_duplicated(self):
        request = make_request("/https://x/c.png", b"/https://x/c.png?v=1", b"v=1")
        assert raw_path_source(request) == "https://x/c.png?v=1"

    def test_falls_back_to_decoded_path(self):
        request = make_request("/https://x/c.png", None)
        assert raw_path_source(request) == "https://x/c.png"


class TestDependencies:
    def test_missing_service_is_configuration_error(self, client: TestClient):
        response = client.get("/service")
        assert response.status_code == 503
        assert response.json()["status"] == "ERROR"
