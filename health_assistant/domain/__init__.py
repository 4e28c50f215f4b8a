"""领域模型与协议。

- models: ChatRequest / ChatResult 以及 Provider 层的请求响应模型。
- chat_log: 持久化的聊天记录与 ChatLogStore 协议。
- exceptions: 业务异常类型与 ErrorKind 分类。
"""
