import sys

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(level: str = "INFO", log_file: str | None = None) -> None:
    """配置日志: 控制台输出, 指定文件时额外按大小滚动写入文件"""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)

    if log_file:
        # 保留7天, 单个文件10MB
        logger.add(log_file, format=LOG_FORMAT, level=level, rotation="10 MB", retention="7 days")

    logger.info(f"日志级别: {level}")
