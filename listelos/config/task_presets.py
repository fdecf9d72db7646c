"""
Pre-defined task configurations.

Each entry overrides ``TrialConfig`` defaults to reproduce one of the
published oculomotor tasks. Times are in seconds. ``latency_reference``
names the cue event saccade latency is measured from, as
``(event, cue_position)`` with event ``'on'`` or ``'off'``.
"""

from typing import Dict, Any


# Stimulation parameters that have no effect on the trial
_NO_STIM = {
    "stim_location": 41,
    "stim_on_time": 2.0,
    "stim_off_time": 2.0,
    "stim_strength": 0.0,
}


TASKS: Dict[str, Dict[str, Any]] = {
    "immediate_serial_recall": {
        "description": "Fixation then three cues, one repeated; recall in order after fixation offset",
        "cue_locations": [41, 38, 14, 38],
        "cue_on_times": [0.0, 0.1, 0.3, 0.5],
        "cue_off_times": [1.0, 0.2, 0.4, 0.6],
        "count_cells": 4,
        "latency_reference": ("off", 0),
    },

    "immediate_serial_recall_5": {
        "description": "Immediate serial recall of four cues (five counting cells)",
        "cue_locations": [41, 38, 14, 38, 68],
        "cue_on_times": [0.0, 0.1, 0.3, 0.5, 0.7],
        "cue_off_times": [1.0, 0.2, 0.4, 0.6, 0.8],
        "count_cells": 5,
        "latency_reference": ("off", 0),
    },

    "saccade_gap0": {
        "description": "Saccade (gap 0): target appears as the fixation point goes off",
        "use_wm": False,
        "cue_locations": [41, 14],
        "cue_on_times": [0.0, 0.5],
        "cue_off_times": [0.5, 1.0],
        **_NO_STIM,
        "latency_reference": ("off", 0),
    },

    "overlap": {
        "description": "Overlap: target appears while the fixation point is still on",
        "use_wm": False,
        "cue_locations": [41, 14],
        "cue_on_times": [0.0, 0.5],
        "cue_off_times": [1.0, 1.5],
        **_NO_STIM,
        "latency_reference": ("off", 0),
    },

    "gap500": {
        "description": "Gap 500: 500 ms blank between fixation offset and target onset",
        "use_wm": False,
        "cue_locations": [41, 14],
        "cue_on_times": [0.0, 1.0],
        "cue_off_times": [0.5, 1.5],
        **_NO_STIM,
        "latency_reference": ("on", 1),
    },

    "delayed_saccade": {
        "description": "Delayed saccade: remembered target, go signal at fixation offset",
        "use_wm": True,
        "cue_locations": [41, 14],
        "cue_on_times": [0.0, 0.5],
        "cue_off_times": [1.5, 1.0],
        **_NO_STIM,
        "latency_reference": ("off", 0),
    },

    "yang_contralateral_control": {
        "description": "Yang et al. control, contralateral target, no stimulation",
        "duration": 1.0,
        "use_wm": False,
        "cue_locations": [41, 14],
        "cue_on_times": [0.0, 0.5],
        "cue_off_times": [0.5, 1.0],
        "stim_strength": 0.0,
        "latency_reference": ("on", 1),
    },

    "yang_ipsilateral_control": {
        "description": "Yang et al. control, ipsilateral target, no stimulation",
        "duration": 1.0,
        "use_wm": False,
        "cue_locations": [41, 68],
        "cue_on_times": [0.0, 0.5],
        "cue_off_times": [0.5, 1.0],
        "stim_strength": 0.0,
        "latency_reference": ("on", 1),
    },

    "yang_ipsilateral_late_stim": {
        "description": "Yang et al. late ipsilateral SEF stimulation, contralateral target",
        "duration": 1.0,
        "use_wm": False,
        "cue_locations": [41, 14],
        "cue_on_times": [0.0, 0.5],
        "cue_off_times": [0.5, 1.0],
        "stim_location": 60,
        "stim_on_time": 0.575,
        "stim_off_time": 0.675,
        "latency_reference": ("on", 1),
    },

    "yang_bilateral_late_stim": {
        "description": "Yang et al. late stimulation near the vertical meridian",
        "duration": 1.0,
        "use_wm": False,
        "cue_locations": [41, 14],
        "cue_on_times": [0.0, 0.5],
        "cue_off_times": [0.5, 1.0],
        "stim_location": 44,
        "stim_on_time": 0.575,
        "stim_off_time": 0.675,
        "latency_reference": ("on", 1),
    },

    "histed_miller_control": {
        "description": "Histed & Miller two-cue sequence, no stimulation",
        "duration": 3.0,
        "cue_locations": [41, 20, 56],
        "cue_on_times": [0.0, 0.5, 0.63],
        "cue_off_times": [2.0, 1.0, 1.0],
        "count_cells": 3,
        "stim_location": 21,
        "stim_on_time": 1.0,
        "stim_off_time": 1.9,
        "stim_strength": 0.0,
        "latency_reference": ("off", 0),
    },

    "histed_miller_stim": {
        "description": "Histed & Miller two-cue sequence with SEF stimulation during the delay",
        "duration": 3.0,
        "cue_locations": [41, 20, 56],
        "cue_on_times": [0.0, 0.5, 0.63],
        "cue_off_times": [2.0, 1.0, 1.0],
        "count_cells": 3,
        "stim_location": 21,
        "stim_on_time": 1.0,
        "stim_off_time": 1.9,
        "stim_strength": 0.4,
        "latency_reference": ("off", 0),
    },
}


def get_task(name: str) -> Dict[str, Any]:
    """
    Get pre-defined task configuration by name.

    Args:
        name: Task name (e.g., 'saccade_gap0', 'immediate_serial_recall')

    Returns:
        Dictionary of configuration overrides (a copy; safe to modify)

    Raises:
        ValueError: If task name is not found
    """
    if name not in TASKS:
        available = ', '.join(TASKS.keys())
        raise ValueError(
            f"Unknown task: '{name}'\n"
            f"Available tasks: {available}"
        )

    task = TASKS[name].copy()
    for key, value in task.items():
        if isinstance(value, list):
            task[key] = list(value)
    return task


def latency_reference_time(task: Dict[str, Any]) -> float:
    """Cue time (s) that saccade latency is measured from for a task preset."""
    event, cue = task.get('latency_reference', ('off', 0))
    times = task['cue_on_times'] if event == 'on' else task['cue_off_times']
    return float(times[cue])


def list_tasks() -> None:
    """Print all available tasks with descriptions."""
    print("\nAvailable Tasks:")
    print("=" * 70)

    for name, task in TASKS.items():
        print(f"\n{name}:")
        print(f"  Description: {task.get('description', 'No description')}")
        print(f"  Cues: {task.get('cue_locations', '?')}")
        print(f"  On/Off (s): {task.get('cue_on_times', '?')} / {task.get('cue_off_times', '?')}")
        print(f"  Working memory: {'on' if task.get('use_wm', True) else 'off'}")
        if task.get('stim_strength', 0.4) > 0:
            print(f"  Stimulation: site {task.get('stim_location', 1)}, "
                  f"{task.get('stim_on_time', 0.0)}-{task.get('stim_off_time', 0.0)} s")
