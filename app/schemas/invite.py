"""
邀请记录Schema
"""
from pydantic import BaseModel
from typing import Optional


class InviteResponse(BaseModel):
    """邀请记录详情"""
    id: str
    inviter: str
    invitee: str
    status: int
    reward_settled: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
