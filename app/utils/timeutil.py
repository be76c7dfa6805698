"""
时间工具
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_time(value: Optional[datetime]) -> Optional[str]:
    """
    将时间格式化为 ISO-8601 字符串

    部分数据库驱动（如 SQLite）返回不带时区的时间，此类时间按 UTC 处理。
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
