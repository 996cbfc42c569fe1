"""
认证数据验证
用户注册、登录、信息等
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from core.security import MAX_PASSWORD_BYTES


class UserCreate(BaseModel):
    """用户注册"""
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        """去除首尾空白，空白名称视为无效"""
        v = v.strip()
        if not v:
            raise ValueError('名称不能为空')
        return v

    @field_validator('password')
    @classmethod
    def check_password_bytes(cls, v):
        """bcrypt 只接受 72 字节以内的输入，多字节字符按 UTF-8 字节计算"""
        if len(v.encode('utf-8')) > MAX_PASSWORD_BYTES:
            raise ValueError(f'密码不能超过 {MAX_PASSWORD_BYTES} 字节')
        return v


class UserLogin(BaseModel):
    """用户登录"""
    email: str
    password: str


class UserInfo(BaseModel):
    """用户公开信息（不包含密码哈希）"""
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AuthResult(BaseModel):
    """注册/登录结果"""
    token: str
    user: UserInfo
