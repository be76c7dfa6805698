"""
用户模型
"""
from sqlalchemy import Column, String, SmallInteger, Integer, JSON, TIMESTAMP
from app.db.database import Base
from app.utils.id_generator import generate_id, generate_invite_code
from app.utils.timeutil import utcnow


class UserStatus:
    """用户状态"""
    BANNED = -100      # 已禁用
    INACTIVATED = -1   # 未激活（微信首次登录创建的账号）
    INIT = 0           # 正常


class Gender:
    UNKNOWN = 0
    MALE = 1
    FEMALE = 2


DEFAULT_ROLE = "user"


class User(Base):
    __tablename__ = "user"

    id = Column(String(32), primary_key=True, default=generate_id)
    username = Column(String(64), unique=True, nullable=False)
    nickname = Column(String(64), nullable=True)
    password = Column(String(128), nullable=False)
    pay_password = Column(String(128), nullable=True)
    phone = Column(String(20), unique=True, nullable=True)
    email = Column(String(255), unique=True, nullable=True)
    status = Column(Integer, nullable=False, default=UserStatus.INIT)
    role = Column(JSON, nullable=False, default=lambda: [DEFAULT_ROLE])
    gender = Column(SmallInteger, nullable=False, default=Gender.UNKNOWN)
    avatar = Column(String, nullable=True)
    invite_code = Column(String(8), unique=True, nullable=False, default=generate_invite_code)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
