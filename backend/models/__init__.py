# Models package
from .protocol import Phase, TaskDefinition, Milestone, TrendCategory, WeightInterpretation, TimelineEntry
from .progress import (
    WeightKind, WeightEntry, TaskState, ProgressRecord,
    WeightUpdateRequest, NameUpdateRequest, ProtocolCheck, ProgressResponse,
)
from .journey import PhaseView, JourneyView, MessagesView
