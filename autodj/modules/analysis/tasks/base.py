"""
Base classes for the analysis Tasks layer.

Each task:
- Takes an analyzed Track (or explicit arrays via execute_with_data)
- Returns a TaskResult subclass
- Contains business logic built from primitives
"""

import time
from abc import ABC, abstractmethod
from typing import Any

from autodj.core.interfaces import TaskResult


class BaseTask(ABC):
    """
    Abstract base class for all tasks.

    Example:
        class MyTask(BaseTask):
            def execute(self, track: Track) -> MyResult:
                profile = compute_beat_energy_profile(track.frame_matrix, track.bpm)
                return MyResult(success=True, ...)
    """

    @property
    def name(self) -> str:
        """Task name (class name by default)."""
        return self.__class__.__name__

    @abstractmethod
    def execute(self, context: Any) -> TaskResult:
        """
        Execute the task.

        Args:
            context: Track record to analyze

        Returns:
            TaskResult subclass with task-specific outputs
        """
        pass

    def execute_timed(self, context: Any) -> TaskResult:
        """
        Execute the task and measure processing time.

        Failures are reported in the result instead of raised.
        """
        start = time.time()
        try:
            result = self.execute(context)
            result.processing_time_sec = time.time() - start
            return result
        except Exception as e:
            return TaskResult(
                success=False,
                task_name=self.name,
                processing_time_sec=time.time() - start,
                error=str(e),
            )

    def __repr__(self) -> str:
        return f"{self.name}()"
