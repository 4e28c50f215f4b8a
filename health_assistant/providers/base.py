"""Provider 抽象接口。

回答生成器不直接依赖任何厂商的 HTTP 接口，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（OpenAIClient、GroqClient、GeminiClient）。
- 负责：将 CompletionRequest 转成厂商请求体，并把响应 JSON 解析为 Completion。
- 失败统一抛出 BusinessError 子类，降级步骤可以用同一种方式处理所有厂商。
"""

from typing import Any, Dict, Protocol

import httpx

from health_assistant.domain.models import Completion, CompletionRequest


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志，也作为 ChatResult 的 provider_tag。
    - model: 从配置解析出的厂商模型 ID。
    - complete(req): 执行一次非流式调用，返回 Completion。
    """

    name: str
    model: str

    def complete(self, req: CompletionRequest) -> Completion:
        ...


def error_message_from(resp: httpx.Response, fallback: str) -> str:
    """从失败响应体中提取厂商错误信息。"""

    try:
        data: Dict[str, Any] = resp.json()
    except ValueError:
        return fallback
    if not isinstance(data, dict):
        return fallback
    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if data.get("message"):
        return str(data["message"])
    return fallback
