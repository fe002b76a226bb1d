"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 存储端连接替身
- 重试等待记录（不真正 sleep）
- 环境变量隔离
"""

import pytest

from yuow.config import ConfigLoader
from yuow.transaction import ResilientUnitOfWork

from tests.helpers import FakeConnection, SyncFakeConnection


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """清除可能影响默认配置的 YUOW_ 环境变量"""
    import os

    for key in list(os.environ):
        if key.startswith("YUOW_"):
            monkeypatch.delenv(key, raising=False)
    yield
    ConfigLoader.clear_cache()


@pytest.fixture
def connection():
    """异步连接替身"""
    return FakeConnection()


@pytest.fixture
def sync_connection():
    """同步连接替身"""
    return SyncFakeConnection()


@pytest.fixture
def recorded_delays(monkeypatch):
    """记录重试等待时间（毫秒），跳过真实等待"""
    delays = []

    async def _fake_delay(self, delay_ms):
        delays.append(delay_ms)

    monkeypatch.setattr(ResilientUnitOfWork, "_delay", _fake_delay)
    return delays
