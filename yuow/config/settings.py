"""
配置模块
提供事务库的默认配置，业务项目可以继承并覆盖
"""

from typing import Any, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pymongo import ReadPreference
from pymongo.client_session import TransactionOptions
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern


S = TypeVar("S", bound=BaseSettings)

# MongoDB 读偏好名称 -> pymongo 读偏好对象
READ_PREFERENCES = {
    "primary": ReadPreference.PRIMARY,
    "primaryPreferred": ReadPreference.PRIMARY_PREFERRED,
    "secondary": ReadPreference.SECONDARY,
    "secondaryPreferred": ReadPreference.SECONDARY_PREFERRED,
    "nearest": ReadPreference.NEAREST,
}

DEFAULT_RETRYABLE_ERRORS: Tuple[str, ...] = (
    "TransientTransactionError",
    "UnknownTransactionCommitResult",
)


class TransactionSettings(BaseSettings):
    """事务配置

    创建会话时作为默认事务选项传给存储端，构造后不可修改。

    使用示例:
        from yuow.config import TransactionSettings

        tx_config = TransactionSettings(
            write_concern_timeout_ms=5000,
        )
        options = tx_config.to_transaction_options()
    """
    read_concern: str = Field(default="snapshot", description="读关注级别")
    write_concern: Union[int, str] = Field(default="majority", description="写关注级别（w）")
    write_concern_timeout_ms: int = Field(default=3000, ge=0, description="写关注超时（毫秒）")
    read_preference: str = Field(default="primary", description="读偏好")

    model_config = SettingsConfigDict(env_prefix="YUOW_TX_", frozen=True)

    @field_validator("read_preference")
    @classmethod
    def _check_read_preference(cls, value: str) -> str:
        if value not in READ_PREFERENCES:
            raise ValueError(
                f"不支持的读偏好 '{value}'，可选值: {', '.join(READ_PREFERENCES)}"
            )
        return value

    def to_transaction_options(self) -> TransactionOptions:
        """转换为 pymongo 的 TransactionOptions"""
        return TransactionOptions(
            read_concern=ReadConcern(self.read_concern),
            write_concern=WriteConcern(
                w=self.write_concern,
                wtimeout=self.write_concern_timeout_ms,
            ),
            read_preference=READ_PREFERENCES[self.read_preference],
        )


class RetrySettings(BaseSettings):
    """重试配置

    配置 ResilientUnitOfWork 的指数退避重试策略，构造后不可修改。

    延迟计算:
        delay = min(initial_delay_ms * backoff_factor ** n, max_delay_ms)
        n 为从 0 开始的重试序号，默认配置下依次为 100, 200, 400, 800, 1000 ...

    使用示例:
        from yuow.config import RetrySettings

        retry_config = RetrySettings(max_retries=5, initial_delay_ms=50)
    """
    max_retries: int = Field(default=3, ge=0, description="最大重试次数（不包括首次尝试）")
    initial_delay_ms: float = Field(default=100, ge=0, description="初始重试间隔（毫秒）")
    max_delay_ms: float = Field(default=1000, ge=0, description="最大重试间隔（毫秒）")
    backoff_factor: float = Field(default=2, ge=1, description="退避乘数")
    retryable_errors: Tuple[str, ...] = Field(
        default=DEFAULT_RETRYABLE_ERRORS,
        description="可重试错误标识（错误名称、错误消息子串或错误标签）",
    )

    model_config = SettingsConfigDict(env_prefix="YUOW_RETRY_", frozen=True)


class LoggingSettings(BaseSettings):
    """日志配置

    使用示例:
        from yuow.config import LoggingSettings
        from yuow.log import setup_root_logger

        log_config = LoggingSettings(level="DEBUG", file_path="logs/app.log")
        setup_root_logger(config=log_config)
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: str = Field(default="", description="日志文件路径，为空时不写文件")
    file_encoding: str = Field(default="utf-8", description="文件编码")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")
    log_format: Optional[str] = Field(default=None, description="日志格式，为空时使用默认格式")

    model_config = SettingsConfigDict(env_prefix="YUOW_LOG_", frozen=True)


class UowSettings(BaseSettings):
    """事务库聚合配置

    内置子配置及环境变量前缀:
        - transaction: TransactionSettings (YUOW_TX_)
        - retry:       RetrySettings       (YUOW_RETRY_)
        - logging:     LoggingSettings     (YUOW_LOG_)

    YAML 配置示例 (config/settings.yaml):
        transaction:
          read_concern: "snapshot"
          write_concern_timeout_ms: 5000
        retry:
          max_retries: 5
        logging:
          level: "DEBUG"
    """
    transaction: TransactionSettings = TransactionSettings()
    retry: RetrySettings = RetrySettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(frozen=True)


def merge_settings(
    settings_class: Type[S],
    value: Union[S, Mapping[str, Any], None] = None,
) -> S:
    """将覆盖项合并到默认配置之上

    Args:
        settings_class: 配置类
        value: None（使用默认值）、配置实例（原样返回）或覆盖项字典

    Returns:
        配置实例

    Raises:
        TypeError: value 类型不受支持
    """
    if value is None:
        return settings_class()
    if isinstance(value, settings_class):
        return value
    if isinstance(value, Mapping):
        return settings_class(**value)
    raise TypeError(
        f"{settings_class.__name__} 需要配置实例或字典，实际为 {type(value).__name__}"
    )
