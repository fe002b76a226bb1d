"""工作单元

管理单个存储端事务会话的完整生命周期：
begin → execute → commit / abort → dispose
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar, Union

from yuow.config import TransactionSettings, merge_settings
from yuow.log import transaction_logger

from .exceptions import NoActiveSessionError, SessionAlreadyActiveError
from .session import (
    Connection,
    TransactionLogger,
    call_session,
    maybe_await,
    session_in_transaction,
)
from .state import TransactionState

T = TypeVar('T')

# 业务函数签名: fn(session, uow) -> result，可以是同步或异步函数
UnitOfWorkFunction = Callable[[Any, "UnitOfWork"], Union[T, Awaitable[T]]]


class UnitOfWork:
    """工作单元

    每个实例同一时间最多持有一个会话。会话在 begin() 时从连接获取，
    在 dispose() 时释放，不会在实例之间共享。

    实例不是并发安全的：一个逻辑流程使用一个实例，连接可以在多个实例间共享。

    使用示例:
        uow = UnitOfWork(client)

        # 方式1：一步完成 begin / execute / commit / dispose
        async def transfer(session, uow):
            await accounts.update_one({"_id": a}, {"$inc": {"balance": -10}}, session=session)
            await accounts.update_one({"_id": b}, {"$inc": {"balance": 10}}, session=session)
            return True

        ok = await uow.execute_transaction(transfer)

        # 方式2：异步上下文管理器
        async with UnitOfWork(client) as uow:
            await orders.insert_one(order, session=uow.get_session())

        # 方式3：手动控制
        await uow.begin()
        try:
            await uow.execute(transfer)
            await uow.commit()
        except Exception:
            await uow.abort()
            raise
        finally:
            await uow.dispose()
    """

    def __init__(
        self,
        connection: Connection,
        *,
        transaction_options: Union[TransactionSettings, Mapping[str, Any], None] = None,
        logger: Optional[TransactionLogger] = None,
    ):
        """初始化工作单元

        Args:
            connection: 连接能力，提供 start_session()
            transaction_options: 事务配置，可传入 TransactionSettings 或覆盖项字典
            logger: 日志接收器，默认使用 yuow.transaction 日志记录器
        """
        if connection is None:
            raise ValueError("connection 不能为空")
        self._connection = connection
        self._transaction_options = merge_settings(TransactionSettings, transaction_options)
        self.logger: TransactionLogger = logger or transaction_logger
        self._session: Any = None
        self._state = TransactionState.NONE

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def transaction_options(self) -> TransactionSettings:
        """事务配置（只读）"""
        return self._transaction_options

    @property
    def is_active(self) -> bool:
        """是否持有会话"""
        return self._session is not None

    @property
    def state(self) -> TransactionState:
        """当前会话上的事务状态"""
        return self._state

    # ------------------------------------------------------------------ #
    # 生命周期
    # ------------------------------------------------------------------ #
    async def begin(self) -> "UnitOfWork":
        """开启会话并启动事务

        Returns:
            工作单元自身，便于链式调用

        Raises:
            SessionAlreadyActiveError: 已经持有会话
        """
        if self._session is not None:
            self.logger.warning("会话已激活，不能重复开启")
            raise SessionAlreadyActiveError()

        self.logger.debug("开启新的事务会话")
        session = await call_session(
            self._connection.start_session,
            default_transaction_options=self._transaction_options.to_transaction_options(),
        )
        try:
            await call_session(session.start_transaction)
        except BaseException as e:
            # 事务没有启动成功，新会话不能泄漏
            self.logger.error(f"启动事务失败: {e}")
            try:
                await call_session(session.end_session)
            except Exception as end_error:
                self.logger.error(f"释放事务会话失败: {end_error}", exc_info=True)
            raise

        self._session = session
        self._state = TransactionState.ACTIVE
        return self

    def get_session(self) -> Any:
        """获取当前会话

        Raises:
            NoActiveSessionError: 没有活跃会话
        """
        if self._session is None:
            raise NoActiveSessionError()
        return self._session

    async def execute(self, fn: UnitOfWorkFunction[T]) -> T:
        """在当前会话中执行业务函数

        只负责调用，不会提交或中止事务。

        Args:
            fn: 业务函数，接收 (session, uow)

        Returns:
            业务函数的返回值

        Raises:
            NoActiveSessionError: 没有活跃会话
        """
        if self._session is None:
            self.logger.warning("没有活跃的事务，请先调用 begin()")
            raise NoActiveSessionError()

        try:
            self.logger.debug("执行事务函数")
            return await maybe_await(fn(self._session, self))
        except Exception as e:
            self.logger.error(f"执行事务函数出错: {type(e).__name__}: {e}")
            raise

    async def commit(self) -> None:
        """提交事务

        没有会话或事务不在进行中时直接返回。提交失败时先中止事务，
        再抛出原始的提交异常。
        """
        session = self._session
        if session is None or not self._state.can_commit() or not session_in_transaction(session):
            return

        try:
            self.logger.debug("提交事务")
            await call_session(session.commit_transaction)
        except BaseException as e:
            self.logger.error(f"提交事务出错: {type(e).__name__}: {e}")
            await self.abort()
            raise

        self._state = TransactionState.COMMITTED
        self.logger.info("事务提交成功")

    async def abort(self) -> None:
        """中止事务

        没有会话或事务不在进行中时直接返回。中止本身的错误只记录日志，
        不会向上抛出，避免掩盖触发中止的原始异常。
        """
        session = self._session
        if session is None or not self._state.can_abort() or not session_in_transaction(session):
            return

        self._state = TransactionState.ABORTED
        try:
            self.logger.debug("中止事务")
            await call_session(session.abort_transaction)
            self.logger.info("事务中止成功")
        except Exception as e:
            self.logger.error(f"中止事务出错: {type(e).__name__}: {e}", exc_info=True)

    async def dispose(self) -> None:
        """释放会话

        无论事务结果如何都会清空会话槽位，重复调用是空操作。
        """
        session = self._session
        if session is None:
            return

        self.logger.debug("释放事务会话")
        self._session = None
        self._state = TransactionState.NONE
        await call_session(session.end_session)

    async def _release(self) -> None:
        """释放会话，失败只记录日志

        供组合操作在 finally 中使用，避免 end_session 的错误覆盖事务结果。
        """
        try:
            await self.dispose()
        except Exception as e:
            self.logger.error(f"释放事务会话出错: {type(e).__name__}: {e}", exc_info=True)

    # ------------------------------------------------------------------ #
    # 组合操作
    # ------------------------------------------------------------------ #
    async def execute_transaction(self, fn: UnitOfWorkFunction[T]) -> T:
        """执行完整事务

        依次执行 begin、execute、commit；execute 或 commit 失败（包括任务取消）
        时中止事务并重新抛出原始异常；会话总是在最后释放，释放失败只记录日志。

        Args:
            fn: 业务函数，接收 (session, uow)

        Returns:
            业务函数的返回值
        """
        self.logger.debug("开始执行事务")
        # begin 失败时不持有新会话，已有会话也不受影响
        await self.begin()
        try:
            result = await self.execute(fn)
            await self.commit()
            self.logger.info("事务执行成功")
            return result
        except BaseException as e:
            self.logger.error(f"事务执行失败: {type(e).__name__}: {e}")
            await self.abort()
            raise
        finally:
            await self._release()

    # ------------------------------------------------------------------ #
    # 上下文管理
    # ------------------------------------------------------------------ #
    async def __aenter__(self) -> "UnitOfWork":
        return await self.begin()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        try:
            if exc_type is not None:
                await self.abort()
            else:
                await self.commit()
        finally:
            await self._release()
        return False
