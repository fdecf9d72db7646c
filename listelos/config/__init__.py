from .trial_config import TrialConfig, get_config
from .task_presets import TASKS, get_task, list_tasks, latency_reference_time

__all__ = [
    'TrialConfig',
    'get_config',
    'TASKS',
    'get_task',
    'list_tasks',
    'latency_reference_time',
]
