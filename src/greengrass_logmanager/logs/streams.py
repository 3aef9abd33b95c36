"""
日志组与日志流命名

日志组：/aws/greengrass/{componentType}/{region}/{componentName}
日志流：/{date}/thing/{thingName}，date 取记录自身时间戳的日期
"""

from loguru import logger

from greengrass_logmanager.domain.enums import ComponentType
from greengrass_logmanager.utils.time import format_stream_date

DEFAULT_LOG_GROUP_NAME = "/aws/greengrass/{componentType}/{region}/{componentName}"
# 日志流名称 1-512 字符，Thing 名称 1-128 字符；
# 日期固定 10 个字符，分隔符 "/" 共 3 个。例如：/2020/12/15/thing/thing-name
DEFAULT_LOG_STREAM_NAME = "/{date}/thing/{thingName}"

MAX_LOG_STREAM_NAME_LENGTH = 512
MAX_THING_NAME_LENGTH = 128


def build_log_group_name(
    component_type: ComponentType | str,
    region: str,
    component_name: str,
    template: str = DEFAULT_LOG_GROUP_NAME,
) -> str:
    """生成日志组名称"""
    if isinstance(component_type, ComponentType):
        component_type = component_type.value
    return (
        template.replace("{componentType}", component_type)
        .replace("{region}", region)
        .replace("{componentName}", component_name)
    )


def build_log_stream_template(thing_name: str, template: str = DEFAULT_LOG_STREAM_NAME) -> str:
    """
    替换 Thing 名称，保留 {date} 占位符

    Thing 名称允许 [a-zA-Z0-9:_-]+，而日志流名称不允许 ':'，统一替换为 '+'。
    """
    if len(thing_name) > MAX_THING_NAME_LENGTH:
        logger.warning("Thing 名称超过 {} 个字符: {}", MAX_THING_NAME_LENGTH, thing_name)
    return template.replace("{thingName}", thing_name).replace(":", "+")


class StreamGrouper:
    """
    日志流分组器

    每次处理过程创建一个，Thing 名称在整个过程中保持不变。
    """

    def __init__(self, thing_name: str, template: str = DEFAULT_LOG_STREAM_NAME):
        self._template = build_log_stream_template(thing_name, template)

    @property
    def template(self) -> str:
        return self._template

    def stream_name(self, timestamp_ms: int) -> str:
        """按记录时间戳的日期生成日志流名称"""
        name = self._template.replace("{date}", format_stream_date(timestamp_ms))
        if len(name) > MAX_LOG_STREAM_NAME_LENGTH:
            logger.warning("日志流名称超过 {} 个字符: {}", MAX_LOG_STREAM_NAME_LENGTH, name)
        return name
