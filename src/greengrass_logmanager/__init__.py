"""
Greengrass Log Manager

把组件已轮转的本地日志文件转换为可上传到 CloudWatch Logs 的批次：
- 按字节偏移断点续读
- 多行日志重组
- 结构化 / 纯文本日志分类与时间戳提取
- 按线上协议大小限制组批
"""

__version__ = "0.1.0"
