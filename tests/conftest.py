import numpy as np
import pytest

from listelos.model.field_layout import build_field_layout
from listelos.model.remap import RemapOperator
from listelos.model.trial_session import TrialSession


@pytest.fixture
def layout():
    return build_field_layout((9, 9), 4)


@pytest.fixture
def remap():
    return RemapOperator(81, 41)


@pytest.fixture
def make_session(layout, remap):
    """Session over an empty 10-step trial; keyword arguments override defaults."""

    def _make(n_steps=10, step=0.001, cue_locations=(41, 38, 14, 38),
              cue_on_times=(0.5, 1.5, 3.5, 5.5), input_signal=None, **kwargs):
        if input_signal is None:
            input_signal = np.zeros((n_steps + 1, layout.n_cells))
        stimulation = np.zeros((layout.n_cells * layout.count_cells, n_steps + 1))
        kwargs.setdefault('rng', np.random.default_rng(0))
        return TrialSession(layout, input_signal, stimulation, remap, step=step,
                            fix_location=41, cue_locations=list(cue_locations),
                            cue_on_times=list(cue_on_times), **kwargs)

    return _make
