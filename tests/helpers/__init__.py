"""测试辅助工具模块

提供存储端连接与会话的测试替身。
"""

from .fake_store import (
    FakeConnection,
    FakeSession,
    SyncFakeConnection,
    SyncFakeSession,
    TransientTransactionError,
    UnknownTransactionCommitResult,
)

__all__ = [
    'FakeConnection',
    'FakeSession',
    'SyncFakeConnection',
    'SyncFakeSession',
    'TransientTransactionError',
    'UnknownTransactionCommitResult',
]
