"""回答流水线的错误转换。

在线调用失败不会传给调用方，流水线会改用模拟模板回答。剩下的只有模拟回答
本身失败（或强制模拟模式下失败）的情况，按错误文本依次匹配映射到 ErrorKind：

- "API key" / "not configured"           -> AI_NOT_CONFIGURED
- "rate limit" / "quota" / "429"         -> RATE_LIMIT
- "401" / "unauthorized" / "Invalid API key" -> INVALID_API_KEY
- 其他                                   -> UNKNOWN_ERROR
"""

from typing import Optional

from health_assistant.assistant.selector import ProviderSelection
from health_assistant.domain.exceptions import AssistantError, BusinessError, ErrorKind


DEFAULT_HELP_URL = "https://console.groq.com/keys"

_NOT_CONFIGURED_MARKERS = ("API key", "not configured", "API_KEY")
_RATE_LIMIT_MARKERS = ("rate limit", "quota", "429")
_INVALID_KEY_MARKERS = ("401", "unauthorized", "Invalid API key")


def _error_text(error: BaseException) -> str:
    if isinstance(error, BusinessError):
        return error.message or ""
    return str(error)


def classify_error(error: BaseException) -> ErrorKind:
    text = _error_text(error)
    if any(marker in text for marker in _NOT_CONFIGURED_MARKERS):
        return ErrorKind.AI_NOT_CONFIGURED
    if any(marker in text for marker in _RATE_LIMIT_MARKERS):
        return ErrorKind.RATE_LIMIT
    if any(marker in text for marker in _INVALID_KEY_MARKERS):
        return ErrorKind.INVALID_API_KEY
    return ErrorKind.UNKNOWN_ERROR


def translate_error(error: BaseException, selection: Optional[ProviderSelection] = None) -> AssistantError:
    """构造返回给聊天接口的分类错误。"""

    kind = classify_error(error)
    provider = selection.name if selection else "openai"
    key_var = f"{provider.upper()}_API_KEY"

    if kind is ErrorKind.AI_NOT_CONFIGURED:
        return AssistantError(
            kind,
            f"AI service is not properly configured. Please add {key_var} to your .env file.",
            http_status=500,
            hint=f"Get API key from: {(selection.help_url if selection else None) or DEFAULT_HELP_URL}",
            provider=provider,
        )
    if kind is ErrorKind.RATE_LIMIT:
        return AssistantError(
            kind,
            "AI service is currently busy or you have exceeded your API quota. "
            "Please try again in a moment or check your API account for usage limits.",
            http_status=429,
            provider=provider,
        )
    if kind is ErrorKind.INVALID_API_KEY:
        return AssistantError(
            kind,
            "Invalid API key. Please check your API key in the .env file and ensure it is correct.",
            http_status=500,
            provider=provider,
        )
    return AssistantError(
        kind,
        _error_text(error) or "Failed to generate AI response. Please try again.",
        http_status=500,
        provider=provider,
    )
