"""
业务异常定义

所有业务错误都继承自 AppError，由 main.py 中注册的异常处理器统一转换为
{"status": 0, "message": ..., "data": null} 响应。
"""
from fastapi import status


class AppError(Exception):
    """业务异常基类"""

    message: str = "未知错误"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unknown(AppError):
    pass


# 参数校验
class InvalidParams(AppError):
    message = "参数错误"
    status_code = status.HTTP_400_BAD_REQUEST


# 资源不存在
class NoData(AppError):
    message = "找不到数据"
    status_code = status.HTTP_404_NOT_FOUND


class InviteNotExist(AppError):
    message = "邀请记录不存在"
    status_code = status.HTTP_404_NOT_FOUND


class InviteCodeNotExist(AppError):
    message = "邀请码不存在"
    status_code = status.HTTP_404_NOT_FOUND


# 认证
class InvalidAccountOrPassword(AppError):
    message = "账号或密码错误"
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidToken(AppError):
    message = "身份令牌无效或已过期"
    status_code = status.HTTP_401_UNAUTHORIZED


# 权限
class NoPermission(AppError):
    message = "没有权限"
    status_code = status.HTTP_403_FORBIDDEN


# 账号状态冲突
class UserIsInActive(AppError):
    message = "账号未激活"
    status_code = status.HTTP_409_CONFLICT


class UserHaveBeenBan(AppError):
    message = "账号已被禁用"
    status_code = status.HTTP_409_CONFLICT


class UserExist(AppError):
    message = "用户已存在"
    status_code = status.HTTP_409_CONFLICT


# 下游服务
class WechatError(AppError):
    message = "微信服务请求失败"
    status_code = status.HTTP_502_BAD_GATEWAY


class DatabaseError(AppError):
    message = "数据库错误"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
