"""统一业务异常模型。

所有跨模块抛出的业务级错误都继承自 BusinessError，
便于在 API 层统一捕获并生成面向用户的回复。
"""

from enum import Enum
from typing import Optional


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_READ_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时使用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、session_id 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如 DNS 失败、连接被拒、超时等。"""


class ApiError(BusinessError):
    """第三方 API 返回非 2xx（且不是 401/403/429）时抛出。"""


class RateLimitError(BusinessError):
    """Provider 限流或额度用尽（HTTP 429）。"""


class AuthenticationError(BusinessError):
    """Provider 拒绝了密钥（HTTP 401/403）。"""


class ConfigurationError(BusinessError):
    """在线调用所需的密钥或 Provider 名称缺失。"""


class ValidationError(BusinessError):
    """参数校验失败。"""


class StoreError(BusinessError):
    """聊天日志存储读写失败。"""


class ErrorKind(str, Enum):
    """无法生成任何回答时返回给聊天接口的错误分类。"""

    AI_NOT_CONFIGURED = "AI_NOT_CONFIGURED"
    RATE_LIMIT = "RATE_LIMIT"
    INVALID_API_KEY = "INVALID_API_KEY"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class AssistantError(BusinessError):
    """回答流水线的最终失败，已按 ErrorKind 分类。"""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        http_status: int = 500,
        hint: Optional[str] = None,
        **extra,
    ):
        self.kind = kind
        self.hint = hint
        super().__init__(code=kind.value, message=message, http_status=http_status, **extra)

    def to_dict(self) -> dict:
        payload = {"message": self.message, "errorCode": self.kind.value}
        if self.hint:
            payload["hint"] = self.hint
        return payload
