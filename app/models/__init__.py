from .user import User, UserStatus, Gender
from .wechat_openid import WechatOpenID
from .login_log import LoginLog, LoginLogType, LoginLogCommand
from .invite_history import InviteHistory, InviteStatus

__all__ = [
    "User",
    "UserStatus",
    "Gender",
    "WechatOpenID",
    "LoginLog",
    "LoginLogType",
    "LoginLogCommand",
    "InviteHistory",
    "InviteStatus",
]
