"""
邀请记录服务
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InviteNotExist, NoPermission
from app.models.invite_history import InviteHistory
from app.schemas.invite import InviteResponse
from app.utils.timeutil import format_time


class InviteService:

    @staticmethod
    async def get_invite(db: AsyncSession, uid: str, invite_id: str) -> InviteResponse:
        """
        获取邀请记录详情，只有邀请人或受邀人可以查看
        """
        async with db.begin():
            result = await db.execute(
                select(InviteHistory).where(InviteHistory.id == invite_id)
            )
            invite = result.scalar_one_or_none()

            if invite is None:
                raise InviteNotExist()

            if uid != invite.inviter and uid != invite.invitee:
                raise NoPermission()

            return InviteResponse(
                id=invite.id,
                inviter=invite.inviter,
                invitee=invite.invitee,
                status=invite.status,
                reward_settled=invite.reward_settled,
                created_at=format_time(invite.created_at),
                updated_at=format_time(invite.updated_at),
            )
