"""
lisTELOS: a neural model of sequential eye movement planning.

Simulates a single trial of the lisTELOS firing-rate model and returns the
state trajectory together with the saccades it made.

Example:
    >>> from listelos import get_config, simulate_trial
    >>> result = simulate_trial(get_config('saccade_gap0'))
    >>> result.saccade_targets
"""

from .config import TrialConfig, get_config, TASKS, get_task, list_tasks
from .simulation import (
    TrialResult, simulate_trial, saccade_latency, TIME_SCALE, INPUT_DELAY,
)

__version__ = "0.1.0"

__all__ = [
    'TrialConfig', 'get_config', 'TASKS', 'get_task', 'list_tasks',
    'TrialResult', 'simulate_trial', 'saccade_latency', 'TIME_SCALE', 'INPUT_DELAY',
]
