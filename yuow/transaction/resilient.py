"""带重试的工作单元

对存储端定义的瞬时错误（如 TransientTransactionError、
UnknownTransactionCommitResult）按指数退避策略自动重试整个事务。
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Mapping, Optional, Set, TypeVar, Union

from yuow.config import RetrySettings, TransactionSettings, merge_settings

from .session import Connection, TransactionLogger
from .state import TransactionState
from .unit_of_work import UnitOfWork, UnitOfWorkFunction

T = TypeVar('T')


def _error_names(error: BaseException) -> Set[str]:
    names = {type(error).__name__}
    name = getattr(error, "name", None)
    if isinstance(name, str):
        names.add(name)
    return names


def is_retryable_error(error: BaseException, retryable_errors: Optional[Iterable[str]]) -> bool:
    """判断错误是否可重试

    满足以下任一条件即可重试：
        - 错误名称（类名或 name 属性）与某个标识完全相同
        - 错误消息包含某个标识
        - 错误带有同名标签（pymongo 的 has_error_label）

    Args:
        error: 捕获的异常
        retryable_errors: 可重试错误标识，为空时任何错误都不重试

    Returns:
        是否可重试
    """
    if not retryable_errors:
        return False

    names = _error_names(error)
    message = str(error)
    has_error_label = getattr(error, "has_error_label", None)

    for identifier in retryable_errors:
        if identifier in names or identifier in message:
            return True
        if callable(has_error_label) and has_error_label(identifier):
            return True
    return False


def calculate_backoff_delay(attempt: int, retry_options: RetrySettings) -> float:
    """计算第 attempt 次重试前的等待时间（毫秒）

    delay = min(initial_delay_ms * backoff_factor ** attempt, max_delay_ms)
    """
    try:
        delay = retry_options.initial_delay_ms * (retry_options.backoff_factor ** attempt)
    except OverflowError:
        # 指数超出浮点范围时取上限
        return retry_options.max_delay_ms
    return min(delay, retry_options.max_delay_ms)


class ResilientUnitOfWork:
    """带重试的工作单元

    持有一个 UnitOfWork，只改写 execute_transaction：每次尝试都会完整地
    begin / execute / commit-或-abort / dispose，不会在两次尝试之间复用会话。
    其余操作原样委托给内部的工作单元。

    重试规则:
        - 尝试序号为 0..max_retries，共 max_retries + 1 次
        - 不可重试的错误或最后一次尝试失败时，立即抛出原始异常
        - 否则等待 calculate_backoff_delay(attempt) 毫秒后进行下一次尝试

    使用示例:
        from yuow.transaction import ResilientUnitOfWork

        uow = ResilientUnitOfWork(client, retry_options={"max_retries": 5})

        async def place_order(session, uow):
            await orders.insert_one(order, session=session)
            await stock.update_one({"_id": sku}, {"$inc": {"qty": -1}}, session=session)
            return order["_id"]

        order_id = await uow.execute_transaction(place_order)
    """

    def __init__(
        self,
        connection: Optional[Connection] = None,
        *,
        transaction_options: Union[TransactionSettings, Mapping[str, Any], None] = None,
        logger: Optional[TransactionLogger] = None,
        retry_options: Union[RetrySettings, Mapping[str, Any], None] = None,
        unit_of_work: Optional[UnitOfWork] = None,
    ):
        """初始化

        Args:
            connection: 连接能力，提供 start_session()；传入 unit_of_work 时可省略
            transaction_options: 事务配置，传给内部的工作单元
            logger: 日志接收器，与内部工作单元共用
            retry_options: 重试配置，可传入 RetrySettings 或覆盖项字典
            unit_of_work: 已有的工作单元，传入后直接为其加上重试策略，
                          此时忽略 connection / transaction_options / logger
        """
        if unit_of_work is None:
            unit_of_work = UnitOfWork(
                connection,
                transaction_options=transaction_options,
                logger=logger,
            )
        self._uow = unit_of_work
        self._retry_options = merge_settings(RetrySettings, retry_options)

    @property
    def unit_of_work(self) -> UnitOfWork:
        """内部的工作单元"""
        return self._uow

    @property
    def retry_options(self) -> RetrySettings:
        """重试配置（只读）"""
        return self._retry_options

    @property
    def logger(self) -> TransactionLogger:
        return self._uow.logger

    # ------------------------------------------------------------------ #
    # 委托操作
    # ------------------------------------------------------------------ #
    @property
    def connection(self) -> Connection:
        return self._uow.connection

    @property
    def transaction_options(self) -> TransactionSettings:
        return self._uow.transaction_options

    @property
    def is_active(self) -> bool:
        return self._uow.is_active

    @property
    def state(self) -> TransactionState:
        return self._uow.state

    async def begin(self) -> "ResilientUnitOfWork":
        await self._uow.begin()
        return self

    def get_session(self) -> Any:
        return self._uow.get_session()

    async def execute(self, fn: UnitOfWorkFunction[T]) -> T:
        return await self._uow.execute(fn)

    async def commit(self) -> None:
        await self._uow.commit()

    async def abort(self) -> None:
        await self._uow.abort()

    async def dispose(self) -> None:
        await self._uow.dispose()

    async def __aenter__(self) -> "ResilientUnitOfWork":
        await self._uow.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        return await self._uow.__aexit__(exc_type, exc_val, exc_tb)

    # ------------------------------------------------------------------ #
    # 重试
    # ------------------------------------------------------------------ #
    def is_retryable_error(self, error: BaseException) -> bool:
        return is_retryable_error(error, self._retry_options.retryable_errors)

    def calculate_backoff_delay(self, attempt: int) -> float:
        return calculate_backoff_delay(attempt, self._retry_options)

    async def _delay(self, delay_ms: float) -> None:
        await asyncio.sleep(delay_ms / 1000)

    async def execute_transaction(self, fn: UnitOfWorkFunction[T]) -> T:
        """执行事务，失败时按配置重试

        Args:
            fn: 业务函数，接收 (session, uow)

        Returns:
            业务函数的返回值

        Raises:
            最后一次尝试的原始异常，不会被包装
        """
        max_retries = self._retry_options.max_retries

        # 最后一次尝试要么返回结果，要么抛出异常
        for attempt in range(max_retries + 1):
            if attempt > 0:
                self.logger.info(f"重试第 {attempt}/{max_retries} 次")
            try:
                return await self._uow.execute_transaction(fn)
            except Exception as e:
                if attempt == max_retries or not self.is_retryable_error(e):
                    self.logger.error(
                        f"事务在重试 {attempt} 次后失败. 异常: {type(e).__name__}: {e}",
                        extra={"attempt": attempt, "max_retries": max_retries},
                    )
                    raise

                delay_ms = self.calculate_backoff_delay(attempt)
                self.logger.warning(
                    f"可重试错误 (尝试 {attempt + 1}/{max_retries + 1}), {delay_ms:g}ms 后重试. "
                    f"异常: {type(e).__name__}: {e}",
                    extra={"attempt": attempt, "next_attempt": attempt + 1, "delay_ms": delay_ms},
                )

            # 会话已在上一次尝试中释放
            await self._delay(delay_ms)
