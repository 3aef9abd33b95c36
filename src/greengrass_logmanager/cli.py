"""命令行入口

对一个组件的日志文件执行一次处理，并输出生成的上传尝试。
支持 process, print-config 命令。
"""

import argparse
import os
import sys
from pathlib import Path

import yaml
from loguru import logger

from greengrass_logmanager import __version__
from greengrass_logmanager.config import LOGMANAGER_CONFIG_FILE, LogManagerConfig, load_config
from greengrass_logmanager.domain.enums import ComponentType
from greengrass_logmanager.domain.errors import ConfigError
from greengrass_logmanager.domain.models import ComponentLogFileInformation, LogFileInformation
from greengrass_logmanager.logs.attempt import AttemptBuilder
from greengrass_logmanager.utils.json import dumps

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(log_level: str = "INFO") -> None:
    """配置日志输出到 stderr"""
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper(), format=CONSOLE_FORMAT)


def parse_file_argument(value: str) -> LogFileInformation:
    """
    解析文件参数 PATH[:OFFSET]

    Raises:
        argparse.ArgumentTypeError: 偏移无效
    """
    path, offset = value, 0
    head, sep, tail = value.rpartition(":")
    if sep and head and tail.isdigit():
        path, offset = head, int(tail)
    elif sep and head and tail.startswith("-") and tail[1:].isdigit():
        raise argparse.ArgumentTypeError(f"偏移不能为负数: {value}")
    return LogFileInformation(path=os.path.abspath(path), start_position=offset)


def _dump(data: dict, output_format: str) -> str:
    if output_format == "json":
        return dumps(data, indent=2)
    return yaml.safe_dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)


def run_process(args: argparse.Namespace) -> int:
    """执行一次处理并输出结果"""
    config = load_config(
        Path(args.config) if args.config else None,
        thing_name=args.thing_name,
        region=args.region,
        min_log_level=args.min_level,
        multiline_pattern=args.multiline_pattern,
    )
    setup_logging(args.log_level or config.log_level)

    component = ComponentLogFileInformation(
        name=args.component,
        component_type=ComponentType(args.component_type),
        desired_log_level=config.desired_level(),
        multiline_start_pattern=config.compiled_pattern(),
        log_files=list(args.files),
    )

    attempt = AttemptBuilder.from_config(config).process_log_files(component)
    logger.info(
        "[{}] 生成上传尝试: {} 条事件, {} 字节, {} 个日志流",
        component.name,
        attempt.total_events(),
        attempt.total_bytes,
        len(attempt.log_streams),
    )

    result = attempt.to_dict()
    result["committed_offsets"] = attempt.committed_offsets()
    result["pending_files"] = [job.to_dict() for job in component.log_files]
    sys.stdout.write(_dump(result, args.format))
    if args.format == "json":
        sys.stdout.write("\n")
    return 0


def print_config(config_path: str | None, output_format: str = "yaml", log_level: str | None = None) -> int:
    """打印当前有效配置"""
    config = load_config(Path(config_path) if config_path else None)
    setup_logging(log_level or config.log_level)
    config_dict = config.to_dict()
    config_dict["_paths"] = {
        "config_file": str(Path(config_path) if config_path else LOGMANAGER_CONFIG_FILE),
    }
    sys.stdout.write(_dump(config_dict, output_format))
    if output_format == "json":
        sys.stdout.write("\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="greengrass_logmanager",
        description=f"Greengrass Log Manager v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用方式:
  处理日志:   python -m greengrass_logmanager process --component MyComponent app.log app.log.1:2048
  查看配置:   python -m greengrass_logmanager print-config

文件参数格式为 PATH[:OFFSET]，OFFSET 为上次已提交的字节偏移。
        """,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="日志级别，默认读取配置",
    )

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    # process 命令
    process_parser = subparsers.add_parser("process", help="处理组件日志文件")
    process_parser.add_argument("--component", required=True, help="组件名称")
    process_parser.add_argument(
        "--component-type",
        default=ComponentType.USER_COMPONENT.value,
        choices=[t.value for t in ComponentType],
        help="组件类型",
    )
    process_parser.add_argument("--config", default=None, help="配置文件路径")
    process_parser.add_argument("--thing-name", default=None, help="设备 Thing 名称")
    process_parser.add_argument("--region", default=None, help="AWS 区域")
    process_parser.add_argument("--min-level", default=None, help="上传的最低日志级别")
    process_parser.add_argument("--multiline-pattern", default=None, help="多行起始正则")
    process_parser.add_argument(
        "--format",
        default="json",
        choices=["json", "yaml"],
        help="输出格式 (json/yaml)",
    )
    process_parser.add_argument(
        "files",
        nargs="+",
        type=parse_file_argument,
        help="日志文件，按从旧到新排列，格式 PATH[:OFFSET]",
    )

    # print-config 命令
    config_parser = subparsers.add_parser("print-config", help="打印当前配置")
    config_parser.add_argument("--config", default=None, help="配置文件路径")
    config_parser.add_argument(
        "--format",
        default="yaml",
        choices=["yaml", "json"],
        help="输出格式 (yaml/json)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """主入口"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # 配置文件加载后会按其中的 log_level 重新设置
    setup_logging(args.log_level or os.getenv("LOGMANAGER_LOG_LEVEL") or LogManagerConfig.log_level)

    try:
        if args.command == "process":
            return run_process(args)
        if args.command == "print-config":
            return print_config(args.config, args.format, args.log_level)
    except ConfigError as e:
        logger.error("配置错误: {}", e.message)
        return 2

    parser.print_help()
    return 0
