"""
认证服务测试：注册与账号密码登录
"""
import pytest
from sqlalchemy import select, func
from pydantic import ValidationError

from app.core.exceptions import (
    InvalidParams, InvalidAccountOrPassword, UserIsInActive, UserHaveBeenBan,
    UserExist, InviteCodeNotExist,
)
from app.models.invite_history import InviteHistory, InviteStatus
from app.models.login_log import LoginLog, LoginLogType, LoginLogCommand
from app.models.user import User, UserStatus
from app.schemas.auth import SignUpParams, SignInParams, WechatCompleteParams
from app.services.auth_service import AuthService
from app.utils.auth import verify_token
from app.utils.password import verify_password

from conftest import TEST_CONTEXT, create_user


async def _login_logs(session_factory, uid):
    async with session_factory() as db:
        result = await db.execute(select(LoginLog).where(LoginLog.uid == uid))
        return list(result.scalars().all())


# ═══════════════════════════════════════════════════════════════════════════
# 注册
# ═══════════════════════════════════════════════════════════════════════════
class TestSignUp:
    @pytest.mark.asyncio
    async def test_sign_up_with_username(self, session_factory):
        async with session_factory() as db:
            profile = await AuthService.sign_up(db, SignUpParams(username="alice", password="123123"))

        assert profile.username == "alice"
        assert profile.status == UserStatus.INIT
        assert profile.role == ["user"]
        assert profile.pay_password is False
        assert len(profile.invite_code) == 8

        async with session_factory() as db:
            user = (await db.execute(select(User).where(User.id == profile.id))).scalar_one()
        assert user.password != "123123"
        assert verify_password("123123", user.password)

    @pytest.mark.asyncio
    async def test_sign_up_with_phone_only_generates_username(self, session_factory):
        async with session_factory() as db:
            profile = await AuthService.sign_up(db, SignUpParams(phone="13800138000", password="123123"))

        assert profile.phone == "13800138000"
        assert profile.username == f"v{profile.id}"

    @pytest.mark.asyncio
    async def test_sign_up_requires_an_account(self, session_factory):
        async with session_factory() as db:
            with pytest.raises(InvalidParams):
                await AuthService.sign_up(db, SignUpParams(password="123123"))

    @pytest.mark.parametrize("username", ["13800138000", "someone@example.com"])
    def test_sign_up_rejects_phone_or_email_shaped_username(self, username):
        with pytest.raises(ValidationError):
            SignUpParams(username=username, password="123123")
        with pytest.raises(ValidationError):
            WechatCompleteParams(code="c", username=username)

    @pytest.mark.asyncio
    async def test_signed_up_username_can_sign_in(self, session_factory):
        async with session_factory() as db:
            profile = await AuthService.sign_up(db, SignUpParams(username="user138", password="123123"))
        async with session_factory() as db:
            data = await AuthService.sign_in(
                db, SignInParams(account="user138", password="123123"), TEST_CONTEXT
            )
        assert data.id == profile.id

    @pytest.mark.asyncio
    async def test_sign_up_rejects_bad_phone_and_email(self, session_factory):
        async with session_factory() as db:
            with pytest.raises(InvalidParams):
                await AuthService.sign_up(db, SignUpParams(phone="12345", password="123123"))
            with pytest.raises(InvalidParams):
                await AuthService.sign_up(db, SignUpParams(email="not-an-email", password="123123"))

    @pytest.mark.asyncio
    async def test_sign_up_duplicate_username(self, session_factory):
        await create_user(session_factory, username="bob")

        async with session_factory() as db:
            with pytest.raises(UserExist):
                await AuthService.sign_up(db, SignUpParams(username="bob", password="123123"))

    @pytest.mark.asyncio
    async def test_sign_up_duplicate_email(self, session_factory):
        await create_user(session_factory, username="bob", email="bob@example.com")

        async with session_factory() as db:
            with pytest.raises(UserExist):
                await AuthService.sign_up(
                    db, SignUpParams(username="other", email="bob@example.com", password="123123")
                )

    @pytest.mark.asyncio
    async def test_sign_up_with_invite_code_records_invite(self, session_factory):
        async with session_factory() as db:
            inviter = await AuthService.sign_up(db, SignUpParams(username="inviter", password="123123"))
        async with session_factory() as db:
            invitee = await AuthService.sign_up(
                db, SignUpParams(username="invitee", password="123123", invite_code=inviter.invite_code)
            )

        async with session_factory() as db:
            result = await db.execute(select(InviteHistory).where(InviteHistory.invitee == invitee.id))
            invite = result.scalar_one()

        assert invite.inviter == inviter.id
        assert invite.status == InviteStatus.REGISTERED
        assert invite.reward_settled is False

    @pytest.mark.asyncio
    async def test_sign_up_unknown_invite_code_rolls_back(self, session_factory):
        async with session_factory() as db:
            with pytest.raises(InviteCodeNotExist):
                await AuthService.sign_up(
                    db, SignUpParams(username="carol", password="123123", invite_code="NOPE0000")
                )

        async with session_factory() as db:
            count = (await db.execute(select(func.count()).select_from(User))).scalar()
        assert count == 0


# ═══════════════════════════════════════════════════════════════════════════
# 账号密码登录
# ═══════════════════════════════════════════════════════════════════════════
class TestSignIn:
    @pytest.mark.asyncio
    async def test_sign_in_with_username(self, session_factory):
        uid = await create_user(session_factory, username="tester", password="123123")

        async with session_factory() as db:
            data = await AuthService.sign_in(
                db, SignInParams(account="tester", password="123123"), TEST_CONTEXT
            )

        assert data.id == uid
        assert data.username == "tester"
        assert verify_token(data.token)["sub"] == uid

        logs = await _login_logs(session_factory, uid)
        assert len(logs) == 1
        assert logs[0].type == LoginLogType.USERNAME
        assert logs[0].command == LoginLogCommand.LOGIN_SUCCESS
        assert logs[0].client == "pytest-agent"
        assert logs[0].last_ip == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_sign_in_with_email(self, session_factory):
        uid = await create_user(session_factory, username="mail-user", email="mail@example.com")

        async with session_factory() as db:
            data = await AuthService.sign_in(
                db, SignInParams(account="mail@example.com", password="123123"), TEST_CONTEXT
            )

        assert data.id == uid
        logs = await _login_logs(session_factory, uid)
        assert logs[0].type == LoginLogType.EMAIL

    @pytest.mark.asyncio
    async def test_sign_in_with_phone(self, session_factory):
        uid = await create_user(session_factory, username="phone-user", phone="13912345678")

        async with session_factory() as db:
            data = await AuthService.sign_in(
                db, SignInParams(account="13912345678", password="123123"), TEST_CONTEXT
            )

        assert data.id == uid
        logs = await _login_logs(session_factory, uid)
        assert logs[0].type == LoginLogType.PHONE

    @pytest.mark.asyncio
    async def test_sign_in_wrong_password(self, session_factory):
        uid = await create_user(session_factory, username="tester", password="123123")

        async with session_factory() as db:
            with pytest.raises(InvalidAccountOrPassword):
                await AuthService.sign_in(
                    db, SignInParams(account="tester", password="wrong"), TEST_CONTEXT
                )

        assert await _login_logs(session_factory, uid) == []

    @pytest.mark.asyncio
    async def test_sign_in_unknown_account(self, session_factory):
        async with session_factory() as db:
            with pytest.raises(InvalidAccountOrPassword):
                await AuthService.sign_in(
                    db, SignInParams(account="nobody", password="123123"), TEST_CONTEXT
                )

    @pytest.mark.asyncio
    async def test_sign_in_inactive_user(self, session_factory):
        uid = await create_user(session_factory, username="sleepy", status=UserStatus.INACTIVATED)

        async with session_factory() as db:
            with pytest.raises(UserIsInActive):
                await AuthService.sign_in(
                    db, SignInParams(account="sleepy", password="123123"), TEST_CONTEXT
                )

        assert await _login_logs(session_factory, uid) == []

    @pytest.mark.asyncio
    async def test_sign_in_banned_user(self, session_factory):
        await create_user(session_factory, username="bad", status=UserStatus.BANNED)

        async with session_factory() as db:
            with pytest.raises(UserHaveBeenBan):
                await AuthService.sign_in(
                    db, SignInParams(account="bad", password="123123"), TEST_CONTEXT
                )
