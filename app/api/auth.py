"""
认证API：注册、账号密码登录、微信小程序登录与账号补全
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.schemas.auth import (
    SignUpParams, SignInParams, SignInWithWechatParams, WechatCompleteParams,
)
from app.schemas.common import ResponseModel, success
from app.services.auth_service import AuthService
from app.utils.auth import ClientContext, get_client_context

router = APIRouter(prefix="/v1/auth", tags=["认证"])


@router.post("/signup", response_model=ResponseModel)
async def sign_up(
    params: SignUpParams,
    db: AsyncSession = Depends(get_db)
):
    """
    注册账号

    请求体:
    {
        "username": "tester",
        "password": "123123",
        "invite_code": "ABCD1234"
    }
    """
    profile = await AuthService.sign_up(db, params)
    return success(profile)


@router.post("/signin", response_model=ResponseModel)
async def sign_in(
    params: SignInParams,
    db: AsyncSession = Depends(get_db),
    context: ClientContext = Depends(get_client_context)
):
    """
    账号密码登录，账号可以是用户名、手机号或邮箱

    返回用户资料以及 token
    """
    data = await AuthService.sign_in(db, params, context)
    return success(data)


@router.post("/signin/wechat", response_model=ResponseModel)
async def sign_in_with_wechat(
    params: SignInWithWechatParams,
    db: AsyncSession = Depends(get_db),
    context: ClientContext = Depends(get_client_context)
):
    """微信小程序登录"""
    data = await AuthService.sign_in_with_wechat(db, params, context)
    return success(data)


@router.post("/wechat/complete", response_model=ResponseModel)
async def wechat_account_complete(
    params: WechatCompleteParams,
    db: AsyncSession = Depends(get_db),
    context: ClientContext = Depends(get_client_context)
):
    """微信账号信息补全（手机号/用户名）"""
    data = await AuthService.wechat_account_complete(db, params, context)
    return success(data)
