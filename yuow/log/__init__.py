"""日志模块

提供事务库使用的日志工具：
- 日志记录器获取（自动推断模块名）
- 控制台 / 文件日志配置
- 微秒精度格式化器

使用示例:
    from yuow.log import setup_logger, get_logger

    # 打开事务调试日志
    setup_logger("yuow.transaction", level="DEBUG")

    logger = get_logger()
    logger.info("服务启动")
"""

from .logger import (
    setup_logger,
    setup_root_logger,
    create_formatter,
    MicrosecondFormatter,
    DEFAULT_LOG_FORMAT,
    transaction_logger,
    logger,
    get_logger,
)

__all__ = [
    "setup_logger",
    "setup_root_logger",
    "create_formatter",
    "MicrosecondFormatter",
    "DEFAULT_LOG_FORMAT",
    "transaction_logger",
    "logger",
    "get_logger",
]
