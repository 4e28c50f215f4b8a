"""LangGraph 图的构建与节点实现。

    select --(mock mode)--> mock
    select --(live)-------> live --(ok)--> END
                                 --(err)-> mock --(ok)--> END
                                                --(err)-> translate (raises)

在线调用失败不会暴露给调用方；只有模拟回答也失败时才进入 translate 节点，
由它抛出分类后的 AssistantError。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from health_assistant.assistant.fallback import translate_error
from health_assistant.flows.state import PipelineState
from health_assistant.infrastructure.logging.logger import logger

if TYPE_CHECKING:
    from health_assistant.assistant.generator import ResponseGenerator


def select_node(state: PipelineState, generator: "ResponseGenerator") -> PipelineState:
    selection = generator.select()
    logger.info(
        "select_node.provider",
        extra={"extra": {"provider": selection.name, "mock": selection.is_mock}},
    )
    return {"selection": selection}


def live_node(state: PipelineState, generator: "ResponseGenerator") -> PipelineState:
    attempt = generator.attempt_live_provider(state["request"], state["selection"])
    if attempt.ok:
        return {"attempt": attempt, "result": attempt.value}
    return {"attempt": attempt}


def mock_node(state: PipelineState, generator: "ResponseGenerator") -> PipelineState:
    try:
        result = generator.mock_fallback(state["request"])
    except Exception as exc:
        logger.error("mock_node.failed", extra={"extra": {"error": str(exc)}})
        return {"error": exc}
    logger.info("mock_node.result", extra={"extra": {"intent": result.intent}})
    return {"result": result, "error": None}


def translate_node(state: PipelineState) -> PipelineState:
    error = state["error"]
    raise translate_error(error, state.get("selection")) from error


def route_after_select(state: PipelineState) -> str:
    selection = state["selection"]
    return "live" if selection.should_call_live else "mock"


def route_after_live(state: PipelineState) -> str:
    attempt = state.get("attempt")
    if attempt is not None and attempt.ok:
        return "done"
    return "mock"


def route_after_mock(state: PipelineState) -> str:
    if state.get("error") is not None:
        return "translate"
    return "done"


def build_graph(generator: "ResponseGenerator") -> CompiledStateGraph:
    graph = StateGraph(PipelineState)
    graph.add_node("select", lambda s: select_node(s, generator))
    graph.add_node("live", lambda s: live_node(s, generator))
    graph.add_node("mock", lambda s: mock_node(s, generator))
    graph.add_node("translate", translate_node)
    graph.set_entry_point("select")
    graph.add_conditional_edges("select", route_after_select, {"mock": "mock", "live": "live"})
    graph.add_conditional_edges("live", route_after_live, {"done": END, "mock": "mock"})
    graph.add_conditional_edges("mock", route_after_mock, {"done": END, "translate": "translate"})
    graph.add_edge("translate", END)
    return graph.compile()
