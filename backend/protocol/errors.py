class ProtocolError(Exception):
    """协议核心错误基类"""


class StoreUnavailableError(ProtocolError):
    """记录存储不可用 (网络/数据库故障), 状态未改变, 调用方可重试"""


class PhaseTableError(ProtocolError):
    """阶段表配置不合法"""


class CatalogError(ProtocolError):
    """打卡项目录配置不合法"""
