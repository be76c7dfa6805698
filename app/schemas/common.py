"""
通用Schema模型
"""
from pydantic import BaseModel
from typing import Any, Optional

STATUS_SUCCESS = 1
STATUS_FAIL = 0


class ResponseModel(BaseModel):
    """标准响应模型"""
    status: int = STATUS_SUCCESS
    message: str = ""
    data: Optional[Any] = None


def success(data: Any = None) -> ResponseModel:
    return ResponseModel(status=STATUS_SUCCESS, message="", data=data)


def fail(message: str) -> ResponseModel:
    return ResponseModel(status=STATUS_FAIL, message=message, data=None)
