from .task import ArrayTask, TaskView

__all__ = ["ArrayTask", "TaskView"]
