from .aggregation import ChartSeries, aggregate, bucket_key, summarize
from .charts import ChartService
from .deletion import (
    Committed,
    Deleted,
    DeletionResult,
    DeletionState,
    DeletionWorkflow,
    NoMatch,
    Preview,
)
from .export import ExportFormat, ExportService

__all__ = [
    "ChartSeries",
    "ChartService",
    "Committed",
    "Deleted",
    "DeletionResult",
    "DeletionState",
    "DeletionWorkflow",
    "ExportFormat",
    "ExportService",
    "NoMatch",
    "Preview",
    "aggregate",
    "bucket_key",
    "summarize",
]
