"""事务状态枚举

定义会话内事务的生命周期状态
"""

from enum import Enum


class TransactionState(str, Enum):
    """事务状态

    状态转换图:

        NONE → ACTIVE → COMMITTED
                  ↓
               ABORTED

    状态说明:
        - NONE: 没有持有会话，或会话上尚未开启事务
        - ACTIVE: 事务进行中
        - COMMITTED: 事务已成功提交
        - ABORTED: 事务已中止
    """

    NONE = "none"
    """无事务：会话未开始或已释放"""

    ACTIVE = "active"
    """活跃状态：事务正在进行中"""

    COMMITTED = "committed"
    """已提交状态：事务已成功提交到存储端"""

    ABORTED = "aborted"
    """已中止状态：事务已被中止"""

    def is_terminal(self) -> bool:
        """判断是否为终态（不可再转换的状态）"""
        return self in (TransactionState.COMMITTED, TransactionState.ABORTED)

    def can_commit(self) -> bool:
        """判断是否可以提交"""
        return self == TransactionState.ACTIVE

    def can_abort(self) -> bool:
        """判断是否可以中止"""
        return self == TransactionState.ACTIVE
