"""
Retinotopic <-> craniotopic coordinate remapping.

For an eye position p, moving a pattern from eye-centred (retinotopic) to
head-centred (craniotopic) coordinates is a translation by (fixation - p)
along the flattened field. Rather than storing one shift matrix per eye
position, the shift is applied directly with index arithmetic. Cells shifted
past either end of the field are dropped (no wrap-around).
"""

import numpy as np
from typing import Optional


class RemapOperator:
    """
    Family of shift operators indexed by eye position.

    Eye positions and field locations are 1-based, as in ``TrialConfig``.
    """

    def __init__(self, n_cells: int, fixation_location: int):
        if n_cells <= 0:
            raise ValueError(f"n_cells must be positive, got {n_cells}")
        if not 1 <= fixation_location <= n_cells:
            raise ValueError(f"fixation_location {fixation_location} outside field of {n_cells} cells")
        self.n_cells = n_cells
        self.fixation_location = fixation_location

    def _check(self, eye_position: int) -> int:
        if not 1 <= eye_position <= self.n_cells:
            raise ValueError(f"Eye position {eye_position} outside field of {self.n_cells} cells")
        return int(eye_position)

    def _shift(self, vector: np.ndarray, offset: int) -> np.ndarray:
        """out[i] = vector[i + offset], zero where i + offset is outside the field."""
        if vector.shape[-1] != self.n_cells:
            raise ValueError(f"Expected vector of {self.n_cells} cells, got shape {vector.shape}")
        out = np.zeros_like(vector, dtype=float)
        n = self.n_cells
        if offset >= n or offset <= -n:
            return out
        if offset >= 0:
            out[..., :n - offset] = vector[..., offset:]
        else:
            out[..., -offset:] = vector[..., :n + offset]
        return out

    def head_from_retina(self, eye_position: int, vector: np.ndarray) -> np.ndarray:
        """Express a retinotopic pattern in craniotopic coordinates."""
        p = self._check(eye_position)
        return self._shift(vector, self.fixation_location - p)

    def retina_from_head(self, eye_position: int, vector: np.ndarray) -> np.ndarray:
        """Express a craniotopic pattern in retinotopic coordinates."""
        p = self._check(eye_position)
        return self._shift(vector, p - self.fixation_location)

    def mirror(self, eye_position: int) -> int:
        """Complementary eye position, n_cells - p + 1."""
        p = self._check(eye_position)
        return self.n_cells - p + 1

    def head_location(self, eye_position: int, retinal_location: int) -> Optional[int]:
        """
        Craniotopic location of a retinotopic one, or None if it leaves the field.

        Equivalent to reading the nonzero index of ``head_from_retina`` applied
        to a one-hot at ``retinal_location``.
        """
        p = self._check(eye_position)
        location = int(retinal_location) + p - self.fixation_location
        if 1 <= location <= self.n_cells:
            return location
        return None

    def __repr__(self):
        return f"RemapOperator(n_cells={self.n_cells}, fixation_location={self.fixation_location})"
