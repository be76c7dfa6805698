"""
认证服务

每个对外操作都在一个数据库事务（`async with db.begin()`）内完成：
正常返回时提交，任何异常都会回滚，登录记录与账号变更同生共死。
"""
from typing import Optional
from sqlalchemy import select, update, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import (
    InvalidParams, InvalidAccountOrPassword, UserIsInActive, UserHaveBeenBan,
    UserExist, NoData, InviteCodeNotExist,
)
from app.core.logging import get_logger
from app.models.user import User, UserStatus, Gender, DEFAULT_ROLE
from app.models.wechat_openid import WechatOpenID
from app.models.login_log import LoginLog, LoginLogType, LoginLogCommand
from app.models.invite_history import InviteHistory, InviteStatus
from app.schemas.auth import (
    SignUpParams, SignInParams, SignInWithWechatParams, WechatCompleteParams,
    Profile, ProfileWithToken,
)
from app.services.wechat_service import WechatService
from app.utils.auth import ClientContext, generate_user_token
from app.utils.id_generator import generate_id
from app.utils.password import hash_password, verify_password
from app.utils.timeutil import format_time
from app.utils.validators import (
    is_phone, is_email, resolve_account,
    ACCOUNT_PHONE, ACCOUNT_EMAIL,
)

logger = get_logger("auth")

LOGIN_TYPE_BY_ACCOUNT = {
    ACCOUNT_PHONE: LoginLogType.PHONE,
    ACCOUNT_EMAIL: LoginLogType.EMAIL,
}


class AuthService:
    """认证服务类"""

    @staticmethod
    def build_profile(user: User) -> Profile:
        """将用户模型转换为对外的资料结构（不包含密码）"""
        return Profile(
            id=user.id,
            username=user.username,
            nickname=user.nickname,
            email=user.email,
            phone=user.phone,
            status=user.status,
            role=list(user.role or []),
            gender=user.gender,
            avatar=user.avatar,
            invite_code=user.invite_code,
            pay_password=bool(user.pay_password),
            created_at=format_time(user.created_at),
            updated_at=format_time(user.updated_at),
        )

    @classmethod
    async def _issue_session(
        cls,
        db: AsyncSession,
        user: User,
        login_type: int,
        context: ClientContext
    ) -> ProfileWithToken:
        """签发token并写入登录记录（调用方负责事务）"""
        token = generate_user_token(user.id)

        db.add(LoginLog(
            uid=user.id,
            type=login_type,
            command=LoginLogCommand.LOGIN_SUCCESS,
            client=context.user_agent,
            last_ip=context.ip,
        ))
        await db.flush()

        profile = cls.build_profile(user)
        return ProfileWithToken(**profile.model_dump(), token=token)

    @staticmethod
    async def _find_wechat_binding(db: AsyncSession, openid: str) -> Optional[WechatOpenID]:
        result = await db.execute(
            select(WechatOpenID)
            .options(selectinload(WechatOpenID.user))
            .where(WechatOpenID.id == openid)
        )
        return result.scalar_one_or_none()

    @classmethod
    async def sign_up(cls, db: AsyncSession, params: SignUpParams) -> Profile:
        """
        注册账号

        用户名、邮箱、手机号至少填写一项；填写了邀请码时同时写入邀请记录。
        """
        if not (params.username or params.email or params.phone):
            raise InvalidParams("用户名、邮箱、手机号至少填写一项")
        if params.phone and not is_phone(params.phone):
            raise InvalidParams("手机号格式错误")
        if params.email and not is_email(params.email):
            raise InvalidParams("邮箱格式错误")

        async with db.begin():
            conditions = []
            if params.username:
                conditions.append(User.username == params.username)
            if params.email:
                conditions.append(User.email == params.email)
            if params.phone:
                conditions.append(User.phone == params.phone)

            result = await db.execute(select(User.id).where(or_(*conditions)).limit(1))
            if result.scalar_one_or_none() is not None:
                raise UserExist()

            inviter = None
            if params.invite_code:
                result = await db.execute(select(User).where(User.invite_code == params.invite_code))
                inviter = result.scalar_one_or_none()
                if inviter is None:
                    raise InviteCodeNotExist()

            uid = generate_id()
            username = params.username or f"v{uid}"
            user = User(
                id=uid,
                username=username,
                nickname=username,
                password=hash_password(params.password),
                email=params.email,
                phone=params.phone,
                status=UserStatus.INIT,
                role=[DEFAULT_ROLE],
                gender=Gender.UNKNOWN,
            )
            db.add(user)

            if inviter is not None:
                db.add(InviteHistory(
                    inviter=inviter.id,
                    invitee=uid,
                    status=InviteStatus.REGISTERED,
                    reward_settled=False,
                ))

            try:
                await db.flush()
            except IntegrityError as e:
                raise UserExist() from e

            profile = cls.build_profile(user)

        logger.info("用户注册成功: uid=%s", uid)
        return profile

    @classmethod
    async def sign_in(
        cls,
        db: AsyncSession,
        params: SignInParams,
        context: ClientContext
    ) -> ProfileWithToken:
        """
        账号密码登录

        账号可以是手机号、邮箱或用户名，按格式自动识别。
        """
        field, account = resolve_account(params.account)
        # TODO: 手机号登录时校验短信验证码 params.code

        async with db.begin():
            result = await db.execute(select(User).where(getattr(User, field) == account))
            user = result.scalar_one_or_none()

            if user is None or not verify_password(params.password, user.password):
                logger.info("登录失败: %s=%s", field, account)
                raise InvalidAccountOrPassword()

            if user.status == UserStatus.INACTIVATED:
                raise UserIsInActive()
            if user.status == UserStatus.BANNED:
                raise UserHaveBeenBan()

            login_type = LOGIN_TYPE_BY_ACCOUNT.get(field, LoginLogType.USERNAME)
            data = await cls._issue_session(db, user, login_type, context)

        logger.info("登录成功: uid=%s ip=%s", user.id, context.ip)
        return data

    @classmethod
    async def _create_wechat_user(cls, db: AsyncSession, openid: str) -> User:
        """为首次登录的微信用户创建未激活账号及 openid 映射"""
        uid = generate_id()
        username = f"v{uid}"

        user = User(
            id=uid,
            username=username,
            nickname=username,
            password=hash_password(uid),
            status=UserStatus.INACTIVATED,  # 开始时未激活状态
            role=[DEFAULT_ROLE],
            gender=Gender.UNKNOWN,
        )
        db.add(user)
        db.add(WechatOpenID(id=openid, uid=uid))
        await db.flush()

        logger.info("创建微信用户: uid=%s", uid)
        return user

    @classmethod
    async def sign_in_with_wechat(
        cls,
        db: AsyncSession,
        params: SignInWithWechatParams,
        context: ClientContext
    ) -> ProfileWithToken:
        """
        微信小程序登录

        openid 没有对应账号时自动创建一个未激活账号，新老用户都会签发token。
        """
        session = await WechatService.code2session(params.code)

        try:
            data = await cls._wechat_sign_in(db, session.openid, context)
        except IntegrityError:
            # 同一 openid 并发首次登录，映射已由另一请求创建，重新读取
            logger.info("微信账号并发创建，重试: openid=%s", session.openid)
            data = await cls._wechat_sign_in(db, session.openid, context)

        logger.info("微信登录成功: uid=%s ip=%s", data.id, context.ip)
        return data

    @classmethod
    async def _wechat_sign_in(
        cls,
        db: AsyncSession,
        openid: str,
        context: ClientContext
    ) -> ProfileWithToken:
        async with db.begin():
            binding = await cls._find_wechat_binding(db, openid)

            if binding is None:
                user = await cls._create_wechat_user(db, openid)
            else:
                user = binding.user

            if user is None:
                raise NoData()
            if user.status == UserStatus.BANNED:
                raise UserHaveBeenBan()

            return await cls._issue_session(db, user, LoginLogType.WECHAT, context)

    @classmethod
    async def wechat_account_complete(
        cls,
        db: AsyncSession,
        params: WechatCompleteParams,
        context: ClientContext
    ) -> ProfileWithToken:
        """
        微信账号信息补全

        只有未激活的账号会被更新：写入手机号/用户名并将状态改为正常。
        """
        if params.phone is not None and not is_phone(params.phone):
            raise InvalidParams("手机号格式错误")

        session = await WechatService.code2session(params.code)

        async with db.begin():
            binding = await cls._find_wechat_binding(db, session.openid)
            if binding is None or binding.user is None:
                raise NoData()

            uid = binding.user.id
            inactivated = binding.user.status == UserStatus.INACTIVATED

            if inactivated and (params.phone is not None or params.username is not None):
                values = {"status": UserStatus.INIT}
                conditions = []
                if params.phone is not None:
                    values["phone"] = params.phone
                    conditions.append(User.phone == params.phone)
                if params.username is not None:
                    values["username"] = params.username
                    conditions.append(User.username == params.username)

                result = await db.execute(
                    select(User.id).where(or_(*conditions), User.id != uid).limit(1)
                )
                if result.scalar_one_or_none() is not None:
                    raise UserExist()

                try:
                    await db.execute(
                        update(User)
                        .where(User.id == uid, User.status == UserStatus.INACTIVATED)
                        .values(**values)
                    )
                except IntegrityError as e:
                    raise UserExist() from e

            result = await db.execute(
                select(User)
                .where(User.id == uid)
                .execution_options(populate_existing=True)
            )
            user = result.scalar_one_or_none()
            if user is None:
                raise InvalidAccountOrPassword()
            if user.status == UserStatus.BANNED:
                raise UserHaveBeenBan()

            data = await cls._issue_session(db, user, LoginLogType.WECHAT, context)

        logger.info("微信账号补全: uid=%s status=%s", user.id, user.status)
        return data
