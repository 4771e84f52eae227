"""fragql execution layer: instrumented dispatch and batching."""
from fragql.execute.batch import BatchCoordinator
from fragql.execute.executor import Executor
from fragql.execute.options import TagOptions

__all__ = [
    "BatchCoordinator",
    "Executor",
    "TagOptions",
]
