"""
邀请记录模型
"""
from sqlalchemy import Column, String, Boolean, SmallInteger, TIMESTAMP
from app.db.database import Base
from app.utils.id_generator import generate_id
from app.utils.timeutil import utcnow


class InviteStatus:
    REGISTERED = 0  # 被邀请人已注册
    RECHARGED = 1   # 被邀请人已充值


class InviteHistory(Base):
    __tablename__ = "invite_history"

    id = Column(String(32), primary_key=True, default=generate_id)
    inviter = Column(String(32), nullable=False, index=True)  # 邀请人
    invitee = Column(String(32), nullable=False, index=True)  # 受邀人
    status = Column(SmallInteger, nullable=False, default=InviteStatus.REGISTERED)
    reward_settled = Column(Boolean, nullable=False, default=False)  # 奖励是否已结算
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
