"""配置模块

提供配置管理功能：
- UowSettings: 聚合配置，支持 YAML + 环境变量
- 子配置类: TransactionSettings, RetrySettings, LoggingSettings
- ConfigLoader: YAML 配置加载器

快速开始:
    from yuow.config import UowSettings, load_yaml_config

    settings = load_yaml_config("config/settings.yaml", UowSettings)

配置优先级: 构造参数 > 环境变量 > 默认值
"""

from .settings import (
    UowSettings,
    TransactionSettings,
    RetrySettings,
    LoggingSettings,
    READ_PREFERENCES,
    DEFAULT_RETRYABLE_ERRORS,
    merge_settings,
)

from .loader import (
    ConfigLoader,
    load_yaml_config,
)

__all__ = [
    # Settings Classes
    "UowSettings",
    "TransactionSettings",
    "RetrySettings",
    "LoggingSettings",
    "READ_PREFERENCES",
    "DEFAULT_RETRYABLE_ERRORS",
    "merge_settings",

    # Config Loader
    "ConfigLoader",
    "load_yaml_config",
]
