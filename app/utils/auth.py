"""
认证工具函数
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import Header, Request
from app.core.config import settings
from app.core.exceptions import InvalidToken


@dataclass
class ClientContext:
    """发起请求的客户端信息（用于登录记录）"""
    user_agent: str = ""
    ip: str = ""


def get_client_context(request: Request) -> ClientContext:
    """
    从请求中提取 User-Agent 和客户端IP

    仅在配置了 TRUST_PROXY_HEADERS 时使用 X-Forwarded-For 的第一个地址。
    """
    forwarded = request.headers.get("x-forwarded-for") if settings.TRUST_PROXY_HEADERS else None
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    elif request.client:
        ip = request.client.host
    else:
        ip = ""
    return ClientContext(user_agent=request.headers.get("user-agent", ""), ip=ip)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    创建JWT访问token

    Args:
        data: 要编码到token中的数据
        expires_delta: token过期时间增量，默认使用配置中的时间

    Returns:
        str: JWT token字符串
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def generate_user_token(uid: str, is_admin: bool = False) -> str:
    """为用户签发会话token"""
    return create_access_token({"sub": uid, "admin": is_admin})


def verify_token(token: str) -> Dict[str, Any]:
    """
    验证JWT token

    Raises:
        InvalidToken: token无效或过期
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise InvalidToken()


async def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """
    从 Authorization 请求头（"Bearer {token}"）解析当前用户ID
    """
    if not authorization:
        raise InvalidToken()

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise InvalidToken("认证格式错误，应为: Bearer {token}")

    payload = verify_token(parts[1])
    uid = payload.get("sub")
    if not uid:
        raise InvalidToken()

    return str(uid)
