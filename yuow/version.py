"""版本信息"""

__version__ = "0.1.0"
__author__ = "yuow"
__description__ = "MongoDB 多文档事务工作单元，支持瞬时错误自动重试"
