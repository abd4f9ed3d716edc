from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List

from models import Phase, TaskDefinition
from protocol.catalog import PROTOCOL_ITEMS, validate_catalog
from protocol.phases import PHASES, TERMINAL_REFERENCE_DAYS, validate_phase_table


class ProtocolDefinition(BaseModel):
    """当前启用的协议配置: 阶段表 + 打卡项目录"""
    model_config = ConfigDict(frozen=True)

    phases: List[Phase] = Field(default_factory=lambda: list(PHASES))
    catalog: List[TaskDefinition] = Field(default_factory=lambda: list(PROTOCOL_ITEMS))
    terminal_reference_days: int = Field(default=TERMINAL_REFERENCE_DAYS, gt=0)

    @model_validator(mode="after")
    def check_tables(self):
        validate_phase_table(self.phases)
        validate_catalog(self.catalog)
        return self

    def task_definition(self, task_id: str):
        for item in self.catalog:
            if item.id == task_id:
                return item
        return None


DEFAULT_PROTOCOL = ProtocolDefinition()
