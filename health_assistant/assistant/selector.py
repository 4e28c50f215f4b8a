"""Provider 选择。

读取配置的 Provider 名称并报告其密钥是否存在。选择本身不会失败：密钥缺失或
Provider 名称未知都体现在返回值上，由生成器降级为模拟回答。
"""

from dataclasses import dataclass
from typing import Optional

from health_assistant.infrastructure.logging.logger import logger, mask_secret
from health_assistant.providers.registry import (
    DEFAULT_PROVIDER,
    MOCK_PROVIDERS,
    find_provider_config,
    read_setting,
    resolve_model,
)


@dataclass(frozen=True)
class ProviderSelection:
    name: str
    is_mock: bool
    is_supported: bool
    has_credential: bool
    model: Optional[str] = None
    help_url: Optional[str] = None

    @property
    def key_env_var(self) -> str:
        return f"{self.name.upper()}_API_KEY"

    @property
    def should_call_live(self) -> bool:
        return not self.is_mock


def provider_name_from(cfg) -> str:
    raw = getattr(cfg, "ai_provider", None)
    if raw is None or not str(raw).strip():
        return DEFAULT_PROVIDER
    return str(raw).strip().lower()


def select_provider(cfg) -> ProviderSelection:
    """根据配置确定当前启用的 Provider。"""

    name = provider_name_from(cfg)
    if name in MOCK_PROVIDERS:
        return ProviderSelection(name=name, is_mock=True, is_supported=True, has_credential=False)

    provider_cfg = find_provider_config(name)
    if provider_cfg is None:
        logger.warning(
            "Unsupported AI provider configured",
            extra={"extra": {"provider": name}},
        )
        return ProviderSelection(name=name, is_mock=False, is_supported=False, has_credential=False)

    api_key = read_setting(cfg, provider_cfg.key_setting)
    selection = ProviderSelection(
        name=name,
        is_mock=False,
        is_supported=True,
        has_credential=api_key is not None,
        model=resolve_model(cfg, provider_cfg),
        help_url=provider_cfg.help_url,
    )
    if not selection.has_credential:
        logger.warning(
            f"{provider_cfg.key_env_var} is not set. Using enhanced mock responses.",
            extra={"extra": {"provider": name, "api_key": mask_secret(api_key)}},
        )
    return selection
