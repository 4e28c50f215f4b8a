"""Provider 配置。

每个上游服务的静态信息：接口地址、默认模型、保存密钥与模型覆盖的 settings
字段名，以及用户获取密钥的地址。生成参数（temperature、max_tokens）所有
Provider 共用。
"""

from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional

from health_assistant.infrastructure.logging.logger import logger


DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 500

MOCK_PROVIDERS = frozenset({"mock", "fallback"})
DEFAULT_PROVIDER = "openai"


@dataclass(frozen=True)
class ProviderConfig:
    """单个在线 Provider 的配置。

    deprecated_models: 已下线的模型名，调用时替换为 default_model。
    """

    name: str
    display_name: str
    base_url: str
    default_model: str
    key_setting: str
    model_setting: str
    base_url_setting: str
    help_url: str
    deprecated_models: FrozenSet[str] = frozenset()

    @property
    def key_env_var(self) -> str:
        return self.key_setting.upper()


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    display_name="OpenAI",
    base_url="https://api.openai.com/v1",
    default_model="gpt-3.5-turbo",
    key_setting="openai_api_key",
    model_setting="openai_model",
    base_url_setting="openai_base_url",
    help_url="https://platform.openai.com/api-keys",
)

GROQ_CONFIG = ProviderConfig(
    name="groq",
    display_name="Groq",
    base_url="https://api.groq.com/openai/v1",
    default_model="llama-3.1-8b-instant",
    key_setting="groq_api_key",
    model_setting="groq_model",
    base_url_setting="groq_base_url",
    help_url="https://console.groq.com/keys",
)

GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    display_name="Gemini",
    base_url="https://generativelanguage.googleapis.com",
    default_model="gemini-1.5-flash",
    key_setting="gemini_api_key",
    model_setting="gemini_model",
    base_url_setting="gemini_base_url",
    help_url="https://makersuite.google.com/app/apikey",
    deprecated_models=frozenset({"gemini-pro", "models/gemini-pro"}),
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "openai": OPENAI_CONFIG,
    "groq": GROQ_CONFIG,
    "gemini": GEMINI_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """按名称查找 ProviderConfig，大小写不敏感。"""

    key = name.strip().lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")


def find_provider_config(name: str) -> Optional[ProviderConfig]:
    try:
        return get_provider_config(name)
    except KeyError:
        return None


def read_setting(settings, attr: str) -> Optional[str]:
    """读取字符串配置，空白值视为未配置。"""

    value = getattr(settings, attr, None)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def resolve_model(settings, config: ProviderConfig) -> str:
    """返回实际调用的模型名：配置覆盖 > 默认模型，已下线的模型替换为默认模型。"""

    model = read_setting(settings, config.model_setting) or config.default_model
    if model in config.deprecated_models:
        logger.warning(
            f'{config.display_name} model "{model}" is deprecated. Falling back to {config.default_model}.',
            extra={"extra": {
                "provider": config.name,
                "configured_model": model,
                "model": config.default_model,
            }},
        )
        return config.default_model
    return model
