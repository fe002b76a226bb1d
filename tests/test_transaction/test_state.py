"""事务状态测试"""

from yuow.transaction import TransactionState


class TestTransactionState:
    """TransactionState 测试"""

    def test_values(self):
        """测试枚举值可直接作为字符串使用"""
        assert TransactionState.ACTIVE == "active"
        assert TransactionState("committed") is TransactionState.COMMITTED

    def test_terminal_states(self):
        """测试终态判断"""
        assert TransactionState.COMMITTED.is_terminal()
        assert TransactionState.ABORTED.is_terminal()
        assert not TransactionState.ACTIVE.is_terminal()
        assert not TransactionState.NONE.is_terminal()

    def test_only_active_can_commit_or_abort(self):
        """测试只有活跃事务可以提交或中止"""
        for state in TransactionState:
            assert state.can_commit() == (state is TransactionState.ACTIVE)
            assert state.can_abort() == (state is TransactionState.ACTIVE)
