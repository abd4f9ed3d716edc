# 协议核心: 阶段表、打卡项目录、日期计算、进度存储、派生视图
from .errors import ProtocolError, StoreUnavailableError, PhaseTableError, CatalogError
from .definition import ProtocolDefinition, DEFAULT_PROTOCOL
from .backends import RecordStore, MongoRecordStore
from .snapshot import LocalSnapshotStore, migrate_snapshot
from .store import ProgressStore, parse_weight
