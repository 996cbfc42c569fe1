"""
主应用端点和全局异常处理单元测试
覆盖：健康检查、API 信息、统一错误格式、中间件响应头
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
class TestHealthEndpoint:
    """健康检查端点测试"""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code in (200, 503)
        assert "database" in response.json()


@pytest.mark.asyncio
class TestRootEndpoints:
    """根路径端点测试"""

    async def test_api_info(self, client: AsyncClient):
        response = await client.get("/api")
        assert response.status_code == 200

        data = response.json()
        assert "name" in data
        assert "version" in data


@pytest.mark.asyncio
class TestErrorShape:
    """统一错误格式测试"""

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json()["status"] == 404
        assert "message" in response.json()

    async def test_method_not_allowed(self, client: AsyncClient):
        response = await client.patch("/api/auth/login")
        assert response.status_code == 405
        assert response.json()["status"] == 405

    async def test_malformed_json(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/login",
            content="{not json",
            headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["status"] == 400


@pytest.mark.asyncio
class TestMiddleware:
    """中间件测试"""

    async def test_security_headers(self, client: AsyncClient):
        response = await client.get("/api/posts")
        assert response.headers.get("X-Content-Type-Options") == "nosniff"
        assert response.headers.get("X-Frame-Options") == "DENY"
        assert "no-store" in response.headers.get("Cache-Control", "")

    async def test_request_id_header(self, client: AsyncClient):
        response = await client.get("/api")
        assert response.headers.get("X-Request-ID")
        assert response.headers.get("X-Response-Time", "").endswith("ms")

    async def test_request_id_passthrough(self, client: AsyncClient):
        response = await client.get("/api", headers={"X-Request-ID": "abc123"})
        assert response.headers.get("X-Request-ID") == "abc123"

    async def test_cors_allowed_origin(self, client: AsyncClient):
        from core.config import get_settings
        origin = get_settings().client_origin
        response = await client.options("/api/posts", headers={
            "Origin": origin,
            "Access-Control-Request-Method": "GET"
        })
        assert response.headers.get("access-control-allow-origin") == origin
