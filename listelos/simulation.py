"""
Trial driver for the lisTELOS model.

Wires layout, signals, remapping and the trial session together, integrates
one trial and converts the results back to seconds.

Time-valued options are given in seconds and multiplied by ``TIME_SCALE``
on the way in; saccade times are divided by it on the way out. This is the
only place the conversion happens.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .config.trial_config import TrialConfig, get_config
from .model.field_layout import FieldLayout, build_field_layout
from .model.inputs import build_input_signal, build_stimulation_signal
from .model.remap import RemapOperator
from .model.trial_session import TrialSession
from .model.integrator import integrate_rk4


# Internal time units per second
TIME_SCALE = 10.0

# Visual response latency of parietal cortex (internal units)
INPUT_DELAY = 0.5


@dataclass
class TrialResult:
    """Outputs of one simulated trial. All times are in seconds."""

    layout: FieldLayout
    times: np.ndarray
    trajectory: np.ndarray
    saccade_times: List[float] = field(default_factory=list)
    saccade_targets: List[int] = field(default_factory=list)
    saccade_outcomes: List[str] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)

    def population(self, name: str) -> np.ndarray:
        """Trajectory of one population, shape (n_samples, population size)."""
        return self.layout.extract(self.trajectory, name)

    def layout_metadata(self) -> Dict[str, Tuple[int, float, int, int]]:
        return self.layout.as_dict()

    def is_finite(self) -> bool:
        """Whether the trajectory is free of NaN and inf."""
        return bool(np.all(np.isfinite(self.trajectory)))

    @property
    def n_saccades(self) -> int:
        return len(self.saccade_times)


def to_internal(seconds):
    """Convert seconds (scalar or sequence) to internal time units."""
    if np.isscalar(seconds):
        return float(seconds) * TIME_SCALE
    return [float(s) * TIME_SCALE for s in seconds]


def to_seconds(internal):
    """Convert internal time units (scalar or sequence) back to seconds."""
    if np.isscalar(internal):
        return float(internal) / TIME_SCALE
    return [float(t) / TIME_SCALE for t in internal]


def simulate_trial(cfg: Optional[TrialConfig] = None, **overrides) -> TrialResult:
    """
    Simulate one lisTELOS trial.

    Args:
        cfg: Trial configuration (defaults to ``TrialConfig()``)
        **overrides: Config parameters to override (see ``get_config``)

    Returns:
        TrialResult with the layout, trajectory and saccade log

    Raises:
        ValueError: On an invalid configuration, before integration starts

    Example:
        >>> result = simulate_trial(get_config('saccade_gap0'))
        >>> result.saccade_targets
    """
    if cfg is None:
        cfg = get_config(**overrides)
    elif overrides:
        cfg = get_config(**{**vars(cfg), **overrides})
    cfg.validate()

    # Convert to internal units
    step = to_internal(cfg.step)
    duration = to_internal(cfg.duration)
    cue_on = to_internal(cfg.cue_on_times)
    cue_off = to_internal(cfg.cue_off_times)
    stim_on = to_internal(cfg.stim_on_time)
    stim_off = to_internal(cfg.stim_off_time)

    if cfg.use_delay:
        cue_on = [t + INPUT_DELAY for t in cue_on]
        cue_off = [t + INPUT_DELAY for t in cue_off]

    n_steps = cfg.n_steps
    times = np.arange(n_steps + 1) * step

    if cfg.verbose:
        print("\n" + "=" * 70)
        print("lisTELOS TRIAL")
        print("=" * 70)
        print(f"Duration: {cfg.duration} s ({n_steps} steps of {cfg.step} s)")
        print(f"Field: {cfg.field_width}x{cfg.field_height}, counting cells: {cfg.count_cells}")
        print(f"Cues: {cfg.cue_locations}")
        print(f"Working memory: {'on' if cfg.use_wm else 'off'}, input delay: {'on' if cfg.use_delay else 'off'}")
        if cfg.stim_strength > 0:
            print(f"Stimulation: site {cfg.stim_location}, {cfg.stim_on_time}-{cfg.stim_off_time} s, "
                  f"strength {cfg.stim_strength}")
        print("=" * 70)

    layout = build_field_layout(cfg.field_size, cfg.count_cells)
    input_signal = build_input_signal(n_steps, step, cfg.n_cells, cfg.cue_locations, cue_on, cue_off)
    stimulation = build_stimulation_signal(
        n_steps, step, cfg.field_size, cfg.count_cells, cfg.stim_location,
        stim_on, stim_off, cfg.stim_spread, cfg.stim_strength
    )
    remap = RemapOperator(cfg.n_cells, cfg.fix_location)

    session = TrialSession(
        layout, input_signal, stimulation, remap,
        step=step,
        fix_location=cfg.fix_location,
        cue_locations=cfg.cue_locations,
        cue_on_times=cue_on,
        use_wm=cfg.use_wm,
        rng=np.random.default_rng(cfg.random_seed),
        verbose=cfg.verbose,
        time_scale=TIME_SCALE,
    )

    trajectory = integrate_rk4(session.derivative, times, layout.initial_state(),
                               show_progress=cfg.show_progress)

    log = session.saccade_log
    result = TrialResult(
        layout=layout,
        times=times / TIME_SCALE,
        trajectory=trajectory,
        saccade_times=to_seconds(log.times),
        saccade_targets=list(log.targets),
        saccade_outcomes=list(log.outcomes),
        messages=list(session.messages),
    )

    if cfg.verbose:
        print(f"\nSaccades: {result.n_saccades}")
        for t, target in zip(result.saccade_times, result.saccade_targets):
            print(f"  t={t:.4f} s -> location {target}")
        if not result.is_finite():
            print("Warning: trajectory contains NaN or inf")

    return result


def saccade_latency(result: TrialResult, target: int, reference_time: float) -> Optional[float]:
    """
    Latency (ms) of the first saccade to ``target``, measured from ``reference_time`` (s).

    Negative when the saccade came before the reference event.

    Returns:
        Latency in milliseconds, or None if the target was never reached
    """
    for t, loc in zip(result.saccade_times, result.saccade_targets):
        if loc == target:
            return (t - reference_time) * 1000.0
    return None
