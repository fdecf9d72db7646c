"""
State vector layout for the lisTELOS model.

Every population of the model lives in one flat state vector. This module
fixes the order, size and initial value of each population and records the
(start, stop) range each one occupies, in the same way layer index ranges
are kept for layered networks.
"""

import numpy as np
from collections import OrderedDict
from typing import Dict, List, Tuple


# Equilibrium values of the basal ganglia nodes with no cortical drive
BG_DIRECT_REST = -0.58
BG_INDIRECT_REST = -0.58
BG_GPE_REST = 0.428571428571429
BG_SNR_REST = 0.4894

# (name, shape, initial value). Shape is 'field' (one value per cell),
# 'rank' (one value per cell per counting cell) or 'scalar'.
POPULATIONS: List[Tuple[str, str, float]] = [
    # PPC
    ('PX', 'field', 0.0),   # area 7a input layer
    ('PI', 'field', 0.0),   # area 7a interneurons
    ('PY', 'field', 0.0),   # area 7a output layer
    ('PL', 'field', 0.0),   # lateral intraparietal cortex
    # PFC
    ('M', 'rank', 0.0),     # item-order-rank working memory
    ('MQ', 'rank', 0.0),    # working memory interneurons
    # SEF
    ('SX', 'rank', 0.0),    # intermediate selection layer
    ('SI', 'rank', 0.0),    # selection interneurons
    ('SY', 'rank', 0.0),    # selection layer
    ('ZD', 'rank', 1.0),    # descending habituative gate
    ('ZA', 'rank', 1.0),    # ascending habituative gate
    ('SO', 'field', 0.0),   # output layer
    # FEF
    ('FP', 'field', 0.0),   # plan layer
    ('FI', 'field', 0.0),   # interneurons
    ('FO', 'field', 0.0),   # output layer
    ('FX', 'field', 0.0),   # post-saccadic cells
    # BG loop gating working memory rehearsal
    ('MD', 'scalar', BG_DIRECT_REST),
    ('MI', 'scalar', BG_INDIRECT_REST),
    ('MG', 'scalar', BG_GPE_REST),
    ('MN', 'scalar', BG_SNR_REST),
    # BG loop gating FEF output
    ('BD', 'field', BG_DIRECT_REST),
    ('BI', 'field', BG_INDIRECT_REST),
    ('BG', 'field', BG_GPE_REST),
    ('BN', 'field', BG_SNR_REST),
    # BG loop gating the colliculus
    ('GD', 'field', BG_DIRECT_REST),
    ('GI', 'field', BG_INDIRECT_REST),
    ('GG', 'field', BG_GPE_REST),
    ('GN', 'field', BG_SNR_REST),
    # Thalamus
    ('R', 'scalar', 1.0),   # rehearsal gate
    ('T', 'field', 0.0),    # plan selection
    # Superior colliculus
    ('C', 'field', 0.0),
]

# Populations read without rectification by the other equations
UNRECTIFIED = frozenset(['ZD', 'ZA', 'MD', 'MI', 'MG', 'MN',
                         'BD', 'BI', 'BG', 'BN', 'GD', 'GI', 'GG', 'GN'])


class Population:
    """Size, initial value and position of one population in the state vector."""

    def __init__(self, name, size, initial, start):
        self.name = name
        self.size = size
        self.initial = initial
        self.start = start
        self.stop = start + size

    @property
    def slice(self) -> slice:
        return slice(self.start, self.stop)

    def __repr__(self):
        return (f"Population({self.name!r}, size={self.size}, initial={self.initial}, "
                f"range=[{self.start}, {self.stop}))")


class FieldLayout:
    """
    Ordered mapping from population name to its range in the state vector.

    The order of ``populations`` is the order derivatives are concatenated in,
    so ``FieldLayout.pack`` and ``TrialSession.derivative`` agree by
    construction.
    """

    def __init__(self, n_cells: int, count_cells: int, populations: List[Population]):
        self.n_cells = n_cells
        self.count_cells = count_cells
        self.populations: Dict[str, Population] = OrderedDict((p.name, p) for p in populations)
        self.total_size = sum(p.size for p in populations)

    @property
    def names(self) -> List[str]:
        return list(self.populations.keys())

    def __getitem__(self, name: str) -> Population:
        try:
            return self.populations[name]
        except KeyError:
            raise ValueError(f"Unknown population: '{name}'. Available: {', '.join(self.names)}")

    def __contains__(self, name: str) -> bool:
        return name in self.populations

    def __len__(self) -> int:
        return len(self.populations)

    def slice(self, name: str) -> slice:
        return self[name].slice

    def initial_state(self) -> np.ndarray:
        """Build the state vector holding every population's initial value."""
        state = np.empty(self.total_size, dtype=float)
        for pop in self.populations.values():
            state[pop.slice] = pop.initial
        return state

    def extract(self, data: np.ndarray, name: str) -> np.ndarray:
        """
        Slice one population out of a state vector or a trajectory.

        Args:
            data: State vector (total_size,) or trajectory (n_times, total_size)
            name: Population name

        Returns:
            View of the population's values (last axis sliced)
        """
        return data[..., self.slice(name)]

    def unpack(self, state: np.ndarray) -> Dict[str, np.ndarray]:
        """Split a state vector into named views."""
        return {name: state[pop.slice] for name, pop in self.populations.items()}

    def pack(self, values: Dict[str, np.ndarray]) -> np.ndarray:
        """
        Concatenate per-population arrays in layout order.

        Raises:
            ValueError: If a population is missing or has the wrong size
        """
        out = np.empty(self.total_size, dtype=float)
        for name, pop in self.populations.items():
            if name not in values:
                raise ValueError(f"Missing values for population '{name}'")
            out[pop.slice] = values[name]
        return out

    def as_dict(self) -> Dict[str, Tuple[int, float, int, int]]:
        """Layout metadata: name -> (size, initial value, start, stop)."""
        return {name: (p.size, p.initial, p.start, p.stop) for name, p in self.populations.items()}

    def __repr__(self):
        return f"FieldLayout({len(self)} populations, {self.total_size} values)"


def build_field_layout(field_size, count_cells: int) -> FieldLayout:
    """
    Define every population's size, initial value and range.

    Args:
        field_size: (width, height) of each spatial field in cells
        count_cells: Number of ordinal rank slots

    Returns:
        FieldLayout whose ranges partition the state vector

    Raises:
        ValueError: On non-positive dimensions
    """
    width, height = int(field_size[0]), int(field_size[1])
    if width <= 0 or height <= 0:
        raise ValueError(f"field_size must be positive, got {tuple(field_size)}")
    if count_cells <= 0:
        raise ValueError(f"count_cells must be positive, got {count_cells}")

    n_cells = width * height
    sizes = {'field': n_cells, 'rank': n_cells * count_cells, 'scalar': 1}

    populations = []
    cursor = 0
    for name, shape, initial in POPULATIONS:
        pop = Population(name, sizes[shape], initial, cursor)
        populations.append(pop)
        cursor = pop.stop

    layout = FieldLayout(n_cells, count_cells, populations)
    assert layout.total_size == cursor
    return layout
