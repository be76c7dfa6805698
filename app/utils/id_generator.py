"""
ID / 邀请码生成工具
"""
import itertools
import secrets
import string
import threading
import time

# 2019-01-01 00:00:00 UTC，单位毫秒
EPOCH_MS = 1546300800000
SEQUENCE_BITS = 12
WORKER_BITS = 10

_lock = threading.Lock()
_last_ms = -1
_sequence = itertools.count()
_worker_id = secrets.randbelow(1 << WORKER_BITS)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 8


def generate_id() -> str:
    """
    生成趋势递增的数字字符串ID（雪花算法：时间戳 | 机器号 | 序列号）
    """
    global _last_ms, _sequence

    with _lock:
        now_ms = int(time.time() * 1000)
        if now_ms != _last_ms:
            _last_ms = now_ms
            _sequence = itertools.count()
        seq = next(_sequence) & ((1 << SEQUENCE_BITS) - 1)

    value = ((now_ms - EPOCH_MS) << (WORKER_BITS + SEQUENCE_BITS)) | (_worker_id << SEQUENCE_BITS) | seq
    return str(value)


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    """生成大写字母+数字组成的邀请码"""
    return ''.join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))
