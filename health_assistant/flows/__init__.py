"""基于 LangGraph 状态图组装的回答流水线。

- state: 各节点共享的 PipelineState。
- graph: 节点实现与图的构建。
- runner: 聊天服务使用的入口。
"""
