from httpx import AsyncClient
from pytest import mark

from app.middleware.middleware import REQUEST_ID_HEADER


@mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "connected"
    assert data["environment"] == "test"
    assert "timestamp" in data


@mark.asyncio
async def test_unknown_route_uses_envelope(client: AsyncClient) -> None:
    response = await client.get("/does/not/exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}


@mark.asyncio
async def test_wrong_method_uses_envelope(client: AsyncClient) -> None:
    response = await client.patch("/api/posts")
    assert response.status_code == 405
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Method Not Allowed"


@mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient) -> None:
    """Incoming request ids are returned unchanged."""
    response = await client.get("/api/health", headers={REQUEST_ID_HEADER: "req-123"})
    assert response.headers[REQUEST_ID_HEADER] == "req-123"


@mark.asyncio
async def test_request_id_is_generated(client: AsyncClient) -> None:
    first = await client.get("/api/health")
    second = await client.get("/api/health")
    assert len(first.headers[REQUEST_ID_HEADER]) == 32
    assert first.headers[REQUEST_ID_HEADER] != second.headers[REQUEST_ID_HEADER]


@mark.asyncio
async def test_security_headers(client: AsyncClient) -> None:
    response = await client.get("/api/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


@mark.asyncio
async def test_openapi_lists_post_operations(client: AsyncClient) -> None:
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]
    assert set(paths["/api/posts"]) == {"get", "post"}
    assert set(paths["/api/posts/{slug}"]) == {"get", "put", "delete"}
