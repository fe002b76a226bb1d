"""
日志工具模块
提供简化的日志配置功能
"""

import inspect
import logging
import os
import time
from typing import Any, Optional


def _parse_log_level(level_str: str) -> int:
    """解析日志级别字符串为整数

    Args:
        level_str: 日志级别字符串，如 "ERROR", "WARNING" 等

    Returns:
        int: 日志级别整数值，无法识别时返回 logging.INFO
    """
    value = getattr(logging, str(level_str).upper(), None)
    return value if isinstance(value, int) else logging.INFO


class MicrosecondFormatter(logging.Formatter):
    """支持微秒精度的日志格式化器"""

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        if datefmt:
            s = time.strftime(datefmt, ct)
        else:
            s = time.strftime("%Y-%m-%d %H:%M:%S", ct)
        # 添加微秒部分（6位数）
        return "%s.%06d" % (s, (record.created - int(record.created)) * 1000000)


# 默认日志格式
DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"


def create_formatter(
    log_format: str = None,
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    use_microseconds: bool = True
) -> logging.Formatter:
    """创建日志格式化器

    Args:
        log_format: 日志格式字符串
        datefmt: 时间格式
        use_microseconds: 是否使用微秒精度

    Returns:
        日志格式化器
    """
    fmt = log_format or DEFAULT_LOG_FORMAT
    if use_microseconds:
        return MicrosecondFormatter(fmt=fmt, datefmt=datefmt)
    return logging.Formatter(fmt, datefmt=datefmt)


def setup_logger(
    name: str = None,
    level: str = "INFO",
    log_file: str = None,
    log_format: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    propagate: bool = True,
    encoding: str = "utf-8"
) -> logging.Logger:
    """设置并返回配置好的日志记录器

    Args:
        name: 日志记录器名称，默认为root logger
        level: 日志级别，可选：DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_file: 日志文件路径，如果不指定则不写入文件
        log_format: 日志格式，如果不指定则使用默认格式
        console: 是否输出到控制台
        use_microseconds: 是否使用微秒精度时间戳
        propagate: 是否传播到父日志器
        encoding: 日志文件编码

    Returns:
        配置好的日志记录器

    使用示例:
        from yuow.log import setup_logger

        # 事务日志输出到控制台
        logger = setup_logger("yuow.transaction", level="DEBUG")

        # 同时写入文件
        logger = setup_logger(
            "yuow.transaction",
            level="INFO",
            log_file="logs/transaction.log",
        )
    """
    # 获取或创建日志记录器
    _logger = logging.getLogger(name) if name else logging.getLogger()
    _logger.setLevel(_parse_log_level(level))
    _logger.propagate = propagate

    # 清除现有的处理器
    _logger.handlers.clear()

    formatter = create_formatter(log_format, use_microseconds=use_microseconds)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        _logger.addHandler(console_handler)

    if log_file:
        # 确保日志目录存在
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding=encoding)
        file_handler.setFormatter(formatter)
        _logger.addHandler(file_handler)

    return _logger


def setup_root_logger(
    level: str = "INFO",
    log_file: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    config: Any = None
) -> logging.Logger:
    """设置根日志记录器

    子日志器（包括 yuow.transaction）会自动继承根日志器的处理器配置。

    Args:
        level: 日志级别（如果提供 config 则忽略）
        log_file: 日志文件路径（如果提供 config 则忽略）
        console: 是否输出到控制台（如果提供 config 则忽略）
        use_microseconds: 是否使用微秒精度
        config: 日志配置对象（如 LoggingSettings），提供后自动提取配置

    Returns:
        根日志记录器

    使用示例:
        # 方式1：参数方式
        logger = setup_root_logger(level="INFO", log_file="logs/app.log")

        # 方式2：配置对象方式
        logger = setup_root_logger(config=settings.logging)
    """
    log_format = None
    encoding = "utf-8"
    if config is not None:
        level = getattr(config, "level", level)
        log_file = getattr(config, "file_path", log_file) or None
        console = getattr(config, "enable_console", console)
        log_format = getattr(config, "log_format", None)
        encoding = getattr(config, "file_encoding", encoding)

    return setup_logger(
        name=None,  # root logger
        level=level,
        log_file=log_file,
        log_format=log_format,
        console=console,
        use_microseconds=use_microseconds,
        propagate=False,
        encoding=encoding,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """获取日志记录器，支持自动推断模块名

    无参数调用时，自动从调用栈获取模块的 __name__ 作为日志器名称。
    有参数调用时，若为不含点号的简写名称，自动添加 'yuow.' 前缀。

    Args:
        name: 日志记录器名称。
              - None: 自动使用调用模块的 __name__
              - 字符串: 使用指定名称（简写自动添加前缀，如 "transaction" -> "yuow.transaction"）

    Returns:
        日志记录器实例

    使用示例:
        from yuow.log import get_logger

        logger = get_logger()                    # 当前模块名
        logger = get_logger("transaction")       # -> "yuow.transaction"
        logger = get_logger("yuow.transaction")  # -> "yuow.transaction"
        logger = get_logger("pymongo.command")   # -> "pymongo.command"
    """
    if name is None:
        frame = inspect.currentframe()
        if frame is not None and frame.f_back is not None:
            name = frame.f_back.f_globals.get('__name__', 'yuow')
        else:
            name = 'yuow'
    elif name != 'yuow' and '.' not in name:
        name = f"yuow.{name}"

    return logging.getLogger(name)


# 事务模块默认日志记录器
transaction_logger = get_logger("yuow.transaction")

# 通用日志记录器
logger = logging.getLogger("yuow")
