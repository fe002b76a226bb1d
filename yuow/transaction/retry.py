"""事务重试装饰器

把异步函数包装到带重试的事务中执行，函数通过 session 关键字参数拿到会话
"""

import inspect
from functools import wraps
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar, Union

from yuow.config import RetrySettings, TransactionSettings

from .resilient import ResilientUnitOfWork
from .session import Connection, TransactionLogger

T = TypeVar('T')


def transaction_with_retry(
    connection: Optional[Connection] = None,
    *,
    retry_options: Union[RetrySettings, Mapping[str, Any], None] = None,
    transaction_options: Union[TransactionSettings, Mapping[str, Any], None] = None,
    logger: Optional[TransactionLogger] = None,
    **retry_overrides: Any
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """带重试机制的事务装饰器

    每次调用都会创建新的 ResilientUnitOfWork，遇到可重试错误时整个函数重新执行。

    Args:
        connection: 连接能力；不传时从第一个位置参数的 _mongo_client 属性获取
        retry_options: 重试配置
        transaction_options: 事务配置
        logger: 日志接收器
        **retry_overrides: 单项重试配置覆盖，如 max_retries=5

    Returns:
        装饰后的函数

    使用示例:
        from yuow.transaction import transaction_with_retry

        @transaction_with_retry(client, max_retries=5)
        async def transfer(from_id, to_id, amount, *, session=None):
            await accounts.update_one({"_id": from_id}, {"$inc": {"balance": -amount}}, session=session)
            await accounts.update_one({"_id": to_id}, {"$inc": {"balance": amount}}, session=session)

        # 在服务类中使用
        class OrderService:
            def __init__(self, client):
                self._mongo_client = client

            @transaction_with_retry()
            async def place_order(self, order, *, session=None):
                await orders.insert_one(order, session=session)
    """
    if retry_overrides:
        base = dict(retry_options) if isinstance(retry_options, Mapping) else (
            retry_options.model_dump() if retry_options is not None else {}
        )
        base.update(retry_overrides)
        retry_options = base

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"{func.__qualname__}: transaction_with_retry 只支持异步函数")

        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            client = connection
            if client is None:
                self_arg = args[0] if args else None
                client = getattr(self_arg, "_mongo_client", None)
            if client is None:
                raise RuntimeError(
                    f"{func.__qualname__}: 无法获取连接，"
                    "请传入 connection 参数或在实例上设置 _mongo_client 属性"
                )

            uow = ResilientUnitOfWork(
                client,
                transaction_options=transaction_options,
                logger=logger,
                retry_options=retry_options,
            )

            async def unit(session, _uow):
                return await func(*args, **{**kwargs, "session": session})

            return await uow.execute_transaction(unit)

        return wrapper

    return decorator
