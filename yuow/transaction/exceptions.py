"""事务异常类

定义工作单元生命周期相关的异常层次结构

存储端报告的错误（包括可重试的瞬时错误）和业务函数抛出的错误
都原样向上传播，不会被包装成这里的异常类型。
"""


class TransactionError(Exception):
    """事务错误基类

    所有由本库主动抛出的异常都继承自此类
    """
    pass


class SessionAlreadyActiveError(TransactionError):
    """会话已激活错误

    当同一个工作单元上已经持有会话时再次调用 begin() 抛出，
    已有会话保持不变
    """

    def __init__(self, message: str = "会话已激活，不能重复开启"):
        super().__init__(message)


class NoActiveSessionError(TransactionError):
    """无活跃会话错误

    当需要会话的操作在 begin() 之前（或 dispose() 之后）调用时抛出
    """

    def __init__(self, message: str = "没有活跃的事务，请先调用 begin()"):
        super().__init__(message)
