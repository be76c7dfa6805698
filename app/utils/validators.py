"""
账号格式校验与账号类型识别
"""
import re
from typing import Tuple

PHONE_REGEX = re.compile(r"^1[3-9]\d{9}$")
EMAIL_REGEX = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

ACCOUNT_PHONE = "phone"
ACCOUNT_EMAIL = "email"
ACCOUNT_USERNAME = "username"


def is_phone(value: str) -> bool:
    """是否为中国大陆手机号"""
    return bool(value) and PHONE_REGEX.match(value) is not None


def is_email(value: str) -> bool:
    return bool(value) and EMAIL_REGEX.match(value) is not None


def resolve_account(account: str) -> Tuple[str, str]:
    """
    根据登录账号的格式判断查询字段

    手机号 -> phone，邮箱 -> email，其余按用户名处理。

    Returns:
        (字段名, 账号值)
    """
    account = account.strip()
    if is_phone(account):
        return ACCOUNT_PHONE, account
    if is_email(account):
        return ACCOUNT_EMAIL, account
    return ACCOUNT_USERNAME, account
