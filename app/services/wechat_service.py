"""
微信小程序服务
"""
import httpx
from app.core.config import settings
from app.core.exceptions import WechatError
from app.core.logging import get_logger
from app.schemas.auth import WechatSession

logger = get_logger("wechat")


class WechatService:
    """微信小程序服务类"""

    @classmethod
    async def code2session(cls, code: str) -> WechatSession:
        """
        使用小程序登录凭证 code 换取 openid / session_key

        Args:
            code: wx.login() 返回的临时登录凭证

        Returns:
            WechatSession: 包含 openid 的会话信息

        Raises:
            WechatError: 网络错误、响应格式错误或微信返回错误码
        """
        if not settings.WECHAT_APPID or not settings.WECHAT_APPSECRET:
            raise WechatError("微信小程序AppID或AppSecret未配置")

        url = f"{settings.WECHAT_API_BASE}/sns/jscode2session"
        params = {
            "appid": settings.WECHAT_APPID,
            "secret": settings.WECHAT_APPSECRET,
            "js_code": code,
            "grant_type": "authorization_code",
        }

        try:
            async with httpx.AsyncClient(timeout=settings.WECHAT_TIMEOUT_SECONDS) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                session = WechatSession.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.warning("jscode2session 请求失败: %s", e)
            raise WechatError() from e
        except ValueError as e:
            # 包括 JSON 解析失败和 pydantic 校验失败
            logger.warning("jscode2session 响应格式错误: %s", e)
            raise WechatError() from e

        if session.errcode != 0:
            logger.warning("jscode2session 返回错误: errcode=%s errmsg=%s", session.errcode, session.errmsg)
            raise WechatError(f"微信授权失败: {session.errmsg or session.errcode}")

        if not session.openid:
            raise WechatError("微信授权失败: 未返回openid")

        return session
