"""
日志管理配置模块

提供设备身份、级别过滤与命名模板等配置，
支持 YAML 配置文件、环境变量与 .env 文件。
"""

import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from loguru import logger

from greengrass_logmanager.domain.enums import LogLevel
from greengrass_logmanager.domain.errors import ConfigError
from greengrass_logmanager.logs.streams import DEFAULT_LOG_GROUP_NAME, DEFAULT_LOG_STREAM_NAME

PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent  # src/greengrass_logmanager -> project root
DATA_ROOT = PROJECT_ROOT / "data" / "logmanager"

# 配置文件路径
LOGMANAGER_CONFIG_FILE = DATA_ROOT / "logmanager_config.yaml"

# 默认多行起始模式：不以空白开头的行开始一条新记录
DEFAULT_MULTILINE_PATTERN = r"^[^\s]"

# 自身日志（loguru）可用级别
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

_ENV_LOADED = False


def _load_env_file() -> None:
    """加载 .env 环境变量（仅一次）"""
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True

    env_path = PROJECT_ROOT / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)


def _get_env_value(*keys: str) -> str | None:
    """按优先顺序读取环境变量"""
    for key in keys:
        value = os.getenv(key)
        if value is not None and value != "":
            return value
    return None


def _load_env_config() -> dict[str, Any]:
    """读取环境变量配置"""
    env_config: dict[str, Any] = {}

    thing_name = _get_env_value("AWS_IOT_THING_NAME", "LOGMANAGER_THING_NAME")
    if thing_name:
        env_config["thing_name"] = thing_name

    region = _get_env_value("AWS_REGION", "LOGMANAGER_REGION")
    if region:
        env_config["region"] = region

    min_log_level = _get_env_value("LOGMANAGER_MIN_LOG_LEVEL")
    if min_log_level:
        env_config["min_log_level"] = min_log_level

    multiline_pattern = _get_env_value("LOGMANAGER_MULTILINE_PATTERN")
    if multiline_pattern:
        env_config["multiline_pattern"] = multiline_pattern

    log_level = _get_env_value("LOGMANAGER_LOG_LEVEL")
    if log_level:
        env_config["log_level"] = log_level

    return env_config


@dataclass
class LogManagerConfig:
    """日志管理配置类"""

    # 设备身份
    thing_name: str = ""
    region: str = "us-east-1"

    # 上传过滤
    min_log_level: str = "INFO"
    multiline_pattern: str = DEFAULT_MULTILINE_PATTERN

    # 命名模板
    log_group_template: str = DEFAULT_LOG_GROUP_NAME
    log_stream_template: str = DEFAULT_LOG_STREAM_NAME

    # 自身日志级别
    log_level: str = "INFO"

    def desired_level(self) -> LogLevel:
        """
        上传的最低日志级别

        Raises:
            ConfigError: 级别名称无效
        """
        try:
            return LogLevel.parse(self.min_log_level)
        except ValueError as e:
            raise ConfigError(str(e), config_key="min_log_level") from e

    def compiled_pattern(self) -> re.Pattern:
        """
        多行起始模式

        Raises:
            ConfigError: 正则表达式无效
        """
        try:
            return re.compile(self.multiline_pattern)
        except re.error as e:
            raise ConfigError(
                f"多行起始模式无效: {self.multiline_pattern!r} ({e})",
                config_key="multiline_pattern",
            ) from e

    def validate(self) -> "LogManagerConfig":
        """校验配置，返回自身"""
        self.desired_level()
        self.compiled_pattern()
        if "{date}" not in self.log_stream_template:
            raise ConfigError(
                "日志流名称模板必须包含 {date}",
                config_key="log_stream_template",
            )
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(
                f"日志级别无效: {self.log_level!r}",
                config_key="log_level",
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "thing_name": self.thing_name,
            "region": self.region,
            "min_log_level": self.min_log_level,
            "multiline_pattern": self.multiline_pattern,
            "log_group_template": self.log_group_template,
            "log_stream_template": self.log_stream_template,
            "log_level": self.log_level,
        }

    def save_to_file(self, path: Path | None = None) -> None:
        """保存配置到文件"""
        path = path or LOGMANAGER_CONFIG_FILE
        os.makedirs(path.parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, allow_unicode=True, default_flow_style=False)

    @classmethod
    def load_from_file(cls, path: Path | None = None) -> "LogManagerConfig":
        """从文件加载配置，文件不存在时使用默认值"""
        path = path or LOGMANAGER_CONFIG_FILE
        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("加载配置文件失败: {}", e)
            return cls()

        if not isinstance(config_data, dict):
            raise ConfigError(f"配置文件格式错误: {path}")

        known = {f.name for f in fields(cls)}
        unknown = set(config_data) - known
        if unknown:
            logger.warning("忽略未知配置项: {}", ", ".join(sorted(unknown)))
        return cls(**{k: v for k, v in config_data.items() if k in known and v is not None})


def load_config(path: Path | None = None, **overrides: Any) -> LogManagerConfig:
    """
    加载配置

    优先级：显式参数 > 环境变量 > 配置文件 > 默认值

    Raises:
        ConfigError: 配置无效
    """
    _load_env_file()

    config = LogManagerConfig.load_from_file(path)
    for key, value in _load_env_config().items():
        setattr(config, key, value)
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)

    return config.validate()
