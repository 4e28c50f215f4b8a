"""回答流水线状态图的状态定义。"""

from __future__ import annotations

from typing import Optional, TypedDict

from health_assistant.assistant.selector import ProviderSelection
from health_assistant.domain.models import ChatRequest, ChatResult, LiveAttempt


class PipelineState(TypedDict, total=False):
    """LangGraph 各节点之间共享的状态。"""

    request: ChatRequest
    selection: Optional[ProviderSelection]
    attempt: Optional[LiveAttempt]
    result: Optional[ChatResult]
    error: Optional[Exception]
