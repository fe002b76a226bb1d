"""事务管理模块

提供基于会话的多文档事务执行封装：
- UnitOfWork: 会话生命周期管理（begin / execute / commit / abort / dispose）
- ResilientUnitOfWork: 对瞬时错误按指数退避自动重试整个事务
- transaction_with_retry: 重试事务装饰器

使用示例:
    from yuow.transaction import UnitOfWork, ResilientUnitOfWork

    # 方式1：单次事务
    uow = UnitOfWork(client)
    result = await uow.execute_transaction(lambda session, uow: do_work(session))

    # 方式2：带重试的事务
    uow = ResilientUnitOfWork(client, retry_options={"max_retries": 5})
    result = await uow.execute_transaction(do_work)

    # 方式3：装饰器
    @transaction_with_retry(client)
    async def do_work(*, session=None):
        ...
"""

from .state import TransactionState
from .exceptions import (
    TransactionError,
    SessionAlreadyActiveError,
    NoActiveSessionError,
)
from .session import (
    Connection,
    SessionHandle,
    TransactionLogger,
)
from .unit_of_work import UnitOfWork, UnitOfWorkFunction
from .resilient import (
    ResilientUnitOfWork,
    is_retryable_error,
    calculate_backoff_delay,
)
from .retry import transaction_with_retry

__all__ = [
    # 状态
    "TransactionState",

    # 异常
    "TransactionError",
    "SessionAlreadyActiveError",
    "NoActiveSessionError",

    # 外部能力协议
    "Connection",
    "SessionHandle",
    "TransactionLogger",

    # 工作单元
    "UnitOfWork",
    "UnitOfWorkFunction",
    "ResilientUnitOfWork",
    "is_retryable_error",
    "calculate_backoff_delay",

    # 重试装饰器
    "transaction_with_retry",
]
