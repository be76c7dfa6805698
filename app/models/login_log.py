"""
登录记录模型（只追加）
"""
from sqlalchemy import Column, BigInteger, Integer, String, SmallInteger, TIMESTAMP, ForeignKey
from app.db.database import Base
from app.utils.timeutil import utcnow


class LoginLogType:
    """登录方式"""
    USERNAME = 0
    EMAIL = 1
    PHONE = 2
    WECHAT = 3


class LoginLogCommand:
    """登录结果"""
    LOGIN_SUCCESS = 0
    LOGIN_FAIL = 1


class LoginLog(Base):
    __tablename__ = "login_log"

    # SQLite 只对 INTEGER 主键自增
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    uid = Column(String(32), ForeignKey("user.id"), nullable=False, index=True)
    type = Column(SmallInteger, nullable=False, default=LoginLogType.USERNAME)
    command = Column(SmallInteger, nullable=False, default=LoginLogCommand.LOGIN_SUCCESS)
    client = Column(String, nullable=True)  # User-Agent
    last_ip = Column(String(64), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
