"""存储端测试替身

模拟 motor / pymongo 的连接与会话行为，并记录调用顺序：
- start_session / commit_transaction / abort_transaction / end_session 为异步方法
- start_transaction 为同步方法，in_transaction 为属性
"""

from typing import Any, List, Optional


class TransientTransactionError(Exception):
    """模拟存储端瞬时事务错误"""
    pass


class UnknownTransactionCommitResult(Exception):
    """模拟提交结果未知错误"""
    pass


class FakeSession:
    """异步会话替身"""

    def __init__(self, connection: "FakeConnection", options: Any):
        self.connection = connection
        self.options = options
        self.in_transaction = False
        self.ended = False
        self.calls: List[str] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        self.connection.events.append(name)

    def start_transaction(self):
        self._record("start_transaction")
        if self.connection.start_transaction_error is not None:
            raise self.connection.start_transaction_error
        self.in_transaction = True

    async def commit_transaction(self):
        self._record("commit_transaction")
        if self.connection.commit_errors:
            # 失败后事务仍处于进行中，交由调用方中止
            raise self.connection.commit_errors.pop(0)
        self.in_transaction = False

    async def abort_transaction(self):
        self._record("abort_transaction")
        if self.connection.abort_error is not None:
            raise self.connection.abort_error
        self.in_transaction = False

    async def end_session(self):
        self._record("end_session")
        self.ended = True
        if self.connection.end_session_error is not None:
            raise self.connection.end_session_error


class FakeConnection:
    """异步连接替身

    Attributes:
        events: 所有会话上的调用序列
        sessions: 已创建的会话
        commit_errors: 依次在 commit_transaction 时抛出的异常
    """

    session_class = FakeSession

    def __init__(self):
        self.events: List[str] = []
        self.sessions: List[Any] = []
        self.session_kwargs: List[dict] = []
        self.start_session_error: Optional[BaseException] = None
        self.start_transaction_error: Optional[BaseException] = None
        self.commit_errors: List[BaseException] = []
        self.abort_error: Optional[BaseException] = None
        self.end_session_error: Optional[BaseException] = None

    async def start_session(self, **kwargs):
        self.events.append("start_session")
        if self.start_session_error is not None:
            raise self.start_session_error
        self.session_kwargs.append(kwargs)
        session = self.session_class(self, kwargs.get("default_transaction_options"))
        self.sessions.append(session)
        return session

    def count(self, name: str) -> int:
        return self.events.count(name)


class SyncFakeSession:
    """同步会话替身（in_transaction 为方法）"""

    def __init__(self, connection: "SyncFakeConnection", options: Any):
        self.connection = connection
        self.options = options
        self._active = False
        self.ended = False

    def in_transaction(self) -> bool:
        return self._active

    def start_transaction(self):
        self.connection.events.append("start_transaction")
        self._active = True

    def commit_transaction(self):
        self.connection.events.append("commit_transaction")
        self._active = False

    def abort_transaction(self):
        self.connection.events.append("abort_transaction")
        self._active = False

    def end_session(self):
        self.connection.events.append("end_session")
        self.ended = True


class SyncFakeConnection:
    """同步连接替身，行为类似 pymongo.MongoClient"""

    def __init__(self):
        self.events: List[str] = []
        self.sessions: List[SyncFakeSession] = []

    def start_session(self, **kwargs):
        self.events.append("start_session")
        session = SyncFakeSession(self, kwargs.get("default_transaction_options"))
        self.sessions.append(session)
        return session
