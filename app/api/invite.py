"""
邀请记录API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.schemas.common import ResponseModel, success
from app.services.invite_service import InviteService
from app.utils.auth import get_current_user_id

router = APIRouter(prefix="/v1/user", tags=["邀请"])


@router.get("/invite/{invite_id}", response_model=ResponseModel)
async def get_invite(
    invite_id: str,
    db: AsyncSession = Depends(get_db),
    current_user_id: str = Depends(get_current_user_id)
):
    """
    获取邀请记录详情（仅邀请人或受邀人可见）
    """
    invite = await InviteService.get_invite(db, current_user_id, invite_id)
    return success(invite)
