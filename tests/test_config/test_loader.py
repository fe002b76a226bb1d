"""配置加载器测试"""

import pytest

from yuow.config import ConfigLoader, UowSettings, load_yaml_config


SETTINGS_YAML = """
transaction:
  read_concern: majority
  write_concern_timeout_ms: 5000
retry:
  max_retries: 5
  retryable_errors:
    - TransientTransactionError
logging:
  level: DEBUG
"""


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(SETTINGS_YAML, encoding="utf-8")
    return path


class TestConfigLoader:
    """ConfigLoader 测试"""

    def test_load(self, settings_file):
        """测试加载 YAML 文件"""
        config = ConfigLoader.load(str(settings_file))

        assert config["retry"]["max_retries"] == 5
        assert config["logging"]["level"] == "DEBUG"

    def test_load_with_base_dir(self, settings_file):
        """测试相对路径 + 基础目录"""
        config = ConfigLoader.load("settings.yaml", base_dir=str(settings_file.parent))

        assert config["transaction"]["read_concern"] == "majority"

    def test_cache_and_reload(self, settings_file):
        """测试缓存与重新加载"""
        first = ConfigLoader.load(str(settings_file))
        settings_file.write_text("retry:\n  max_retries: 1\n", encoding="utf-8")

        assert ConfigLoader.load(str(settings_file)) is first

        reloaded = ConfigLoader.reload(str(settings_file))
        assert reloaded["retry"]["max_retries"] == 1

    def test_empty_file(self, tmp_path):
        """测试空文件返回空字典"""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert ConfigLoader.load(str(path)) == {}

    def test_missing_file(self, tmp_path):
        """测试文件不存在"""
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(str(tmp_path / "missing.yaml"))


class TestLoadYamlConfig:
    """load_yaml_config 测试"""

    def test_load_settings(self, settings_file):
        """测试加载为 UowSettings"""
        settings = load_yaml_config(str(settings_file), UowSettings)

        assert settings.transaction.read_concern == "majority"
        assert settings.transaction.write_concern_timeout_ms == 5000
        assert settings.transaction.read_preference == "primary"
        assert settings.retry.max_retries == 5
        assert settings.retry.retryable_errors == ("TransientTransactionError",)
        assert settings.logging.level == "DEBUG"

    def test_overrides_do_not_pollute_cache(self, settings_file):
        """测试覆盖参数不会写入缓存"""
        settings = load_yaml_config(str(settings_file), UowSettings, retry={"max_retries": 0})

        assert settings.retry.max_retries == 0
        assert ConfigLoader.load(str(settings_file))["retry"]["max_retries"] == 5
