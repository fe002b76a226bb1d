"""
yuow - MongoDB 多文档事务工作单元

提供会话生命周期管理、瞬时错误自动重试、配置与日志等基础功能
"""

from .version import __version__, __author__, __description__

# 导出事务模块
from .transaction import (
    TransactionState,
    TransactionError,
    SessionAlreadyActiveError,
    NoActiveSessionError,
    UnitOfWork,
    ResilientUnitOfWork,
    transaction_with_retry,
)

# 导出配置模块
from .config import (
    UowSettings,
    TransactionSettings,
    RetrySettings,
    LoggingSettings,
    load_yaml_config,
)

# 导出日志模块
from .log import (
    setup_logger,
    setup_root_logger,
    get_logger,
)

__all__ = [
    "__version__",
    "__author__",
    "__description__",

    # 事务
    "TransactionState",
    "TransactionError",
    "SessionAlreadyActiveError",
    "NoActiveSessionError",
    "UnitOfWork",
    "ResilientUnitOfWork",
    "transaction_with_retry",

    # 配置
    "UowSettings",
    "TransactionSettings",
    "RetrySettings",
    "LoggingSettings",
    "load_yaml_config",

    # 日志
    "setup_logger",
    "setup_root_logger",
    "get_logger",
]
