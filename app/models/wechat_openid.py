"""
微信OpenID与用户的映射模型（1:1）
"""
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey
from sqlalchemy.orm import relationship
from app.db.database import Base
from app.utils.timeutil import utcnow


class WechatOpenID(Base):
    __tablename__ = "wechat_openid"

    id = Column(String(64), primary_key=True)  # 微信OpenID
    uid = Column(String(32), ForeignKey("user.id"), unique=True, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", lazy="raise")
