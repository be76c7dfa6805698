"""
认证相关Schema
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from app.utils.validators import resolve_account, ACCOUNT_USERNAME


def _strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


def _check_username(v: Optional[str]) -> Optional[str]:
    """用户名不能是手机号或邮箱格式，否则登录时会被识别为手机号/邮箱"""
    if v is not None and resolve_account(v)[0] != ACCOUNT_USERNAME:
        raise ValueError("用户名不能是手机号或邮箱格式")
    return v


class SignUpParams(BaseModel):
    """注册请求"""
    username: Optional[str] = Field(None, min_length=1, max_length=64, description="用户名")
    email: Optional[str] = Field(None, max_length=255, description="邮箱")
    phone: Optional[str] = Field(None, max_length=20, description="手机号")
    password: str = Field(..., min_length=6, max_length=64, description="密码")
    invite_code: Optional[str] = Field(None, max_length=8, description="邀请码")

    @field_validator("username", "email", "phone", "invite_code")
    @classmethod
    def strip_blank(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: Optional[str]) -> Optional[str]:
        return _check_username(v)


class SignInParams(BaseModel):
    """账号密码登录请求"""
    account: str = Field(..., min_length=1, max_length=255, description="登录账号（用户名/手机号/邮箱）")
    password: str = Field(..., min_length=1, max_length=64, description="密码")
    code: Optional[str] = Field(None, description="手机验证码")


class SignInWithWechatParams(BaseModel):
    """微信小程序登录请求"""
    code: str = Field(..., min_length=1, description="微信小程序授权之后返回的 code")


class WechatCompleteParams(BaseModel):
    """微信账号信息补全请求"""
    code: str = Field(..., min_length=1, description="微信小程序授权之后返回的 code")
    phone: Optional[str] = Field(None, max_length=20, description="手机号")
    username: Optional[str] = Field(None, min_length=1, max_length=64, description="用户名")

    @field_validator("phone", "username")
    @classmethod
    def strip_blank(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: Optional[str]) -> Optional[str]:
        return _check_username(v)


class WechatSession(BaseModel):
    """微信 jscode2session 接口返回"""
    openid: Optional[str] = None       # 用户唯一标识
    session_key: Optional[str] = None  # 会话密钥
    unionid: Optional[str] = None      # 用户在开放平台的唯一标识符
    errcode: int = 0
    errmsg: Optional[str] = None


class Profile(BaseModel):
    """用户资料"""
    id: str
    username: str
    nickname: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: int
    role: List[str] = []
    gender: int
    avatar: Optional[str] = None
    invite_code: str
    pay_password: bool = False  # 是否已设置支付密码
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileWithToken(Profile):
    token: str
