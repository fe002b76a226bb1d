"""存储端能力协议

定义工作单元依赖的外部能力（连接、会话、日志）以及统一的调用辅助函数。

兼容同步与异步两类驱动：
    - pymongo.MongoClient: start_session / commit_transaction 等为同步方法
    - pymongo.AsyncMongoClient、motor: 对应方法返回 awaitable
    - in_transaction 在 pymongo 中是属性，在部分封装中是方法
"""

import inspect
from typing import Any, Awaitable, Callable, Protocol, TypeVar, Union, runtime_checkable


T = TypeVar('T')


@runtime_checkable
class SessionHandle(Protocol):
    """存储端会话协议

    一个会话绑定一个底层连接，由工作单元独占持有。
    """

    def start_transaction(self) -> Any: ...

    def commit_transaction(self) -> Any: ...

    def abort_transaction(self) -> Any: ...

    def end_session(self) -> Any: ...


@runtime_checkable
class Connection(Protocol):
    """连接能力协议

    可以在多个工作单元之间共享，本库不会修改连接状态。
    """

    def start_session(self, **kwargs: Any) -> Any: ...


@runtime_checkable
class TransactionLogger(Protocol):
    """日志接收器协议

    标准库 logging.Logger 天然满足此协议。
    """

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...


async def maybe_await(value: Union[T, Awaitable[T]]) -> T:
    """如果 value 是 awaitable 则等待其结果，否则原样返回"""
    if inspect.isawaitable(value):
        return await value
    return value


async def call_session(method: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """调用会话/连接方法，同时兼容同步与异步实现"""
    return await maybe_await(method(*args, **kwargs))


def session_in_transaction(session: Any) -> bool:
    """判断会话上是否有进行中的事务

    Args:
        session: 存储端会话

    Returns:
        是否在事务中
    """
    flag = getattr(session, "in_transaction", False)
    if callable(flag):
        flag = flag()
    return bool(flag)
