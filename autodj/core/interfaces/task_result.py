"""
Task Result - Common result shape for analysis tasks.

Tasks report failures in the result instead of raising (see BaseTask).
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass


@dataclass
class TaskResult:
    """
    Base result for all tasks.

    Attributes:
        success: Whether the task completed successfully
        task_name: Name of the task
        processing_time_sec: How long the task took
        error: Error message if success is False
    """
    success: bool
    task_name: str = ""
    processing_time_sec: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            'success': self.success,
            'task_name': self.task_name,
            'processing_time_sec': self.processing_time_sec,
            'error': self.error,
        }
