"""
认证模块测试
覆盖：服务层注册/登录/当前用户、API 路由端点
"""

import pytest
from httpx import AsyncClient

from core.auth_service import AuthService, normalize_email
from core.errors import AuthException, ConflictException, ValidationException
from core.security import create_token, TokenData
from tests.test_conftest import auth_headers


class TestNormalizeEmail:

    def test_normalize(self):
        assert normalize_email("  Alice@Example.COM ") == "alice@example.com"


# ==================== 服务层测试 ====================

@pytest.mark.asyncio
class TestAuthService:
    """测试认证服务层"""

    async def test_register(self, db_session):
        service = AuthService(db_session)
        result = await service.register("Alice", "alice@example.com", "pw123456")

        assert result.token
        assert result.user.id is not None
        assert result.user.name == "Alice"
        assert result.user.email == "alice@example.com"
        assert "password_hash" not in result.user.model_dump()

    async def test_password_stored_hashed(self, db_session):
        service = AuthService(db_session)
        await service.register("Alice", "alice@example.com", "pw123456")
        user = await service.get_user_by_email("alice@example.com")
        assert user.password_hash != "pw123456"

    async def test_register_duplicate_email(self, db_session):
        """同一邮箱注册两次，第二次冲突"""
        service = AuthService(db_session)
        await service.register("Alice", "alice@example.com", "pw123456")
        with pytest.raises(ConflictException):
            await service.register("Alice2", "alice@example.com", "other-pw")

    async def test_register_duplicate_email_case_insensitive(self, db_session):
        service = AuthService(db_session)
        await service.register("Alice", "alice@example.com", "pw123456")
        with pytest.raises(ConflictException):
            await service.register("Alice", "ALICE@example.com", "pw123456")

    async def test_login(self, db_session):
        service = AuthService(db_session)
        registered = await service.register("Alice", "alice@example.com", "pw123456")
        result = await service.login("alice@example.com", "pw123456")
        assert result.user.id == registered.user.id

    async def test_login_wrong_password(self, db_session):
        service = AuthService(db_session)
        await service.register("Alice", "alice@example.com", "pw123456")
        with pytest.raises(AuthException):
            await service.login("alice@example.com", "wrong")

    async def test_login_unknown_email(self, db_session):
        service = AuthService(db_session)
        with pytest.raises(AuthException):
            await service.login("nobody@example.com", "pw123456")

    async def test_get_current_user(self, db_session):
        service = AuthService(db_session)
        result = await service.register("Alice", "alice@example.com", "pw123456")
        user = await service.get_current_user(result.token)
        assert user == result.user

    async def test_get_current_user_invalid_token(self, db_session):
        service = AuthService(db_session)
        with pytest.raises(AuthException):
            await service.get_current_user("not-a-token")
        with pytest.raises(AuthException):
            await service.get_current_user(None)

    async def test_get_current_user_unknown_subject(self, db_session):
        service = AuthService(db_session)
        token = create_token(TokenData(user_id=999, email="ghost@example.com"))
        with pytest.raises(AuthException):
            await service.get_current_user(token)

    async def test_login_multibyte_password_suffix(self, db_session):
        """72 字节的多字节密码加上任意后缀都不能登录"""
        service = AuthService(db_session)
        await service.register("Alice", "alice@example.com", "密" * 24)
        with pytest.raises(AuthException):
            await service.login("alice@example.com", "密" * 24 + "WRONG")

    async def test_register_password_over_72_bytes(self, db_session):
        service = AuthService(db_session)
        with pytest.raises(ValidationException):
            await service.register("Alice", "alice@example.com", "密" * 24 + "secretA")


# ==================== API 路由测试 ====================

@pytest.mark.asyncio
class TestAuthAPI:
    """认证 API 测试"""

    async def test_register(self, client: AsyncClient, alice_data: dict):
        resp = await client.post("/api/auth/register", json=alice_data)
        assert resp.status_code == 201
        body = resp.json()
        assert body["token"]
        assert set(body["user"].keys()) == {"id", "name", "email"}
        assert body["user"]["email"] == "alice@example.com"

    async def test_register_duplicate(self, client: AsyncClient, alice_data: dict):
        await client.post("/api/auth/register", json=alice_data)
        resp = await client.post("/api/auth/register", json=alice_data)
        assert resp.status_code == 409
        assert resp.json()["status"] == 409
        assert resp.json()["message"]

    async def test_register_invalid_email(self, client: AsyncClient):
        resp = await client.post("/api/auth/register", json={
            "name": "X", "email": "not-an-email", "password": "pw123456"
        })
        assert resp.status_code == 400
        assert resp.json()["status"] == 400

    async def test_register_missing_fields(self, client: AsyncClient):
        resp = await client.post("/api/auth/register", json={"email": "a@example.com"})
        assert resp.status_code == 400

    async def test_login(self, client: AsyncClient, alice_data: dict, alice_token: str):
        resp = await client.post("/api/auth/login", json={
            "email": alice_data["email"], "password": alice_data["password"]
        })
        assert resp.status_code == 200
        assert resp.json()["user"]["name"] == "Alice"
        assert resp.json()["token"]

    async def test_login_bad_credentials(self, client: AsyncClient, alice_data: dict, alice_token: str):
        resp = await client.post("/api/auth/login", json={
            "email": alice_data["email"], "password": "wrong-password"
        })
        assert resp.status_code == 401
        assert resp.json() == {"message": resp.json()["message"], "status": 401}

    async def test_me_resolves_token_owner(self, client: AsyncClient, alice_token: str):
        """注册得到的令牌可以解析回同一用户"""
        resp = await client.get("/api/auth/me", headers=auth_headers(alice_token))
        assert resp.status_code == 200
        assert resp.json()["user"]["email"] == "alice@example.com"

    async def test_me_with_login_token(self, client: AsyncClient, alice_data: dict, alice_token: str):
        login = await client.post("/api/auth/login", json={
            "email": alice_data["email"], "password": alice_data["password"]
        })
        token = login.json()["token"]
        resp = await client.get("/api/auth/me", headers=auth_headers(token))
        assert resp.json()["user"]["id"] == login.json()["user"]["id"]

    async def test_me_without_token(self, client: AsyncClient):
        resp = await client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["status"] == 401

    async def test_me_with_invalid_token(self, client: AsyncClient):
        resp = await client.get("/api/auth/me", headers=auth_headers("bogus"))
        assert resp.status_code == 401

    async def test_me_with_wrong_scheme(self, client: AsyncClient, alice_token: str):
        resp = await client.get("/api/auth/me", headers={"Authorization": f"Basic {alice_token}"})
        assert resp.status_code == 401

    async def test_register_multibyte_password_too_long(self, client: AsyncClient):
        """密码上限按 UTF-8 字节计算"""
        resp = await client.post("/api/auth/register", json={
            "name": "Alice", "email": "alice@example.com", "password": "密" * 24 + "secretA"
        })
        assert resp.status_code == 400
        assert resp.json()["status"] == 400

    async def test_login_rejects_password_sharing_72_byte_prefix(self, client: AsyncClient):
        password = "密" * 24
        await client.post("/api/auth/register", json={
            "name": "Alice", "email": "alice@example.com", "password": password
        })
        resp = await client.post("/api/auth/login", json={
            "email": "alice@example.com", "password": password + "WRONG"
        })
        assert resp.status_code == 401
