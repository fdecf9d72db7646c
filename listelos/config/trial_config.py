"""
Central configuration for lisTELOS trial simulations.

Every option recognised by the trial driver is a field of ``TrialConfig``.
All time-valued options are in seconds; the driver converts them to the
model's internal time unit on the way in and back on the way out.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class TrialConfig:
    """
    Configuration for a single lisTELOS trial.

    The defaults describe the immediate serial recall trial used throughout
    the model paper: a fixation point at the centre of a 9x9 field followed
    by three cues, one of them repeated.
    """

    # ========== Simulation ==========
    step: float = 0.0001
    """Fixed integration step (s). Must be small enough for RK4 stability."""

    duration: float = 2.0
    """Trial duration (s)"""

    verbose: bool = False
    """Print saccade events and diagnostics while simulating"""

    show_progress: bool = False
    """Show a progress bar over integration steps"""

    random_seed: int = 42
    """Seed for the working-memory noise stream of this trial"""

    # ========== Model Shape ==========
    count_cells: int = 4
    """
    Number of counting cells (ordinal rank slots). Must be at least the number
    of non-fixation cues presented in the trial.
    """

    field_size: Tuple[int, int] = (9, 9)
    """Size (width, height) of every spatial field, in cells"""

    use_wm: bool = True
    """
    Allow parietal output to load prefrontal working memory. Disabling it
    reproduces simple visuomotor tasks that do not recruit memory cells.
    """

    use_delay: bool = True
    """Delay visual input by the parietal response latency"""

    fix_location: int = 41
    """Field index (1-based, column-major) of the fixation point"""

    # ========== Visual Cues ==========
    cue_locations: List[int] = field(default_factory=lambda: [41, 38, 14, 38])
    """Field index (1-based) of every cue, fixation point included"""

    cue_on_times: List[float] = field(default_factory=lambda: [0.0, 0.1, 0.3, 0.5])
    """Onset time (s) of each cue"""

    cue_off_times: List[float] = field(default_factory=lambda: [1.0, 0.2, 0.4, 0.6])
    """Offset time (s) of each cue"""

    # ========== Microstimulation ==========
    stim_location: int = 1
    """Field index (1-based) the stimulating electrode is centred on"""

    stim_on_time: float = 0.0
    """Time (s) stimulation starts"""

    stim_off_time: float = 0.0
    """Time (s) stimulation ends"""

    stim_spread: float = 3.0
    """Standard deviation (cells) of the Gaussian stimulation profile"""

    stim_strength: float = 0.4
    """Peak strength of microstimulation"""

    # ========== Computed Properties ==========
    @property
    def field_width(self) -> int:
        return int(self.field_size[0])

    @property
    def field_height(self) -> int:
        return int(self.field_size[1])

    @property
    def n_cells(self) -> int:
        """Number of cells in one vectorised field"""
        return self.field_width * self.field_height

    @property
    def n_steps(self) -> int:
        """Number of integration steps (the trajectory has n_steps + 1 rows)"""
        return int(round(self.duration / self.step))

    @property
    def fixation_cue_indices(self) -> List[int]:
        """Positions in ``cue_locations`` that present the fixation point"""
        return [i for i, loc in enumerate(self.cue_locations) if loc == self.fix_location]

    @property
    def n_target_cues(self) -> int:
        """Number of cues that are not the fixation point"""
        return len(self.cue_locations) - len(self.fixation_cue_indices)

    def validate(self) -> None:
        """
        Reject malformed or inconsistent configurations.

        Raises:
            ValueError: On the first problem found
        """
        if self.step <= 0:
            raise ValueError(f"step must be positive, got {self.step}")
        if self.duration <= 0:
            raise ValueError(f"duration must be positive, got {self.duration}")
        if self.step > self.duration:
            raise ValueError(f"step ({self.step}) is longer than duration ({self.duration})")
        if len(self.field_size) != 2:
            raise ValueError(f"field_size must be (width, height), got {self.field_size}")
        if self.field_width <= 0 or self.field_height <= 0:
            raise ValueError(f"field_size must be positive, got {self.field_size}")
        if self.count_cells <= 0:
            raise ValueError(f"count_cells must be positive, got {self.count_cells}")

        n_cues = len(self.cue_locations)
        if len(self.cue_on_times) != n_cues or len(self.cue_off_times) != n_cues:
            raise ValueError(
                f"cue_locations ({n_cues}), cue_on_times ({len(self.cue_on_times)}) and "
                f"cue_off_times ({len(self.cue_off_times)}) must have the same length"
            )

        self._check_location('fix_location', self.fix_location)
        self._check_location('stim_location', self.stim_location)
        for loc in self.cue_locations:
            self._check_location('cue_locations', loc)

        if self.n_target_cues > self.count_cells:
            raise ValueError(
                f"{self.n_target_cues} non-fixation cues need at least as many counting cells, "
                f"got count_cells={self.count_cells}"
            )
        if self.stim_spread <= 0:
            raise ValueError(f"stim_spread must be positive, got {self.stim_spread}")

    def _check_location(self, name: str, location: int) -> None:
        if not 1 <= int(location) <= self.n_cells:
            raise ValueError(f"{name} value {location} outside field of {self.n_cells} cells")


def get_config(name: str = None, **kwargs) -> TrialConfig:
    """
    Get a trial configuration with optional overrides.

    Args:
        name: Optional task preset to start from (see ``task_presets.TASKS``)
        **kwargs: Any config parameter to override

    Returns:
        TrialConfig instance

    Example:
        >>> cfg = get_config('saccade_gap0', duration=1.0)
        >>> cfg = get_config(cue_locations=[41, 14], cue_on_times=[0, .5], cue_off_times=[.5, 1])
    """
    cfg = TrialConfig()

    if name:
        from .task_presets import get_task
        overrides = get_task(name)
        overrides.pop('description', None)
        overrides.pop('latency_reference', None)
        overrides.update(kwargs)
        kwargs = overrides

    for key, value in kwargs.items():
        if hasattr(cfg, key) and not isinstance(getattr(type(cfg), key, None), property):
            setattr(cfg, key, value)
        else:
            raise ValueError(f"Unknown config parameter: {key}")

    return cfg
