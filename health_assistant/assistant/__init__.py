"""回答流水线的组成部分。

- selector: 当前启用的 Provider 以及其密钥是否存在。
- intents: 在线回答使用的关键词意图/建议规则。
- mock: 预置的话题模板。
- generator: 在线调用与模拟降级两个步骤。
- fallback: 错误分类。
"""
