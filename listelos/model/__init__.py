"""lisTELOS model components: state layout, signals, remapping and dynamics."""

from .field_layout import FieldLayout, Population, build_field_layout
from .inputs import build_input_signal, build_stimulation_signal, sample_index
from .remap import RemapOperator
from .trial_session import TrialSession, SaccadeLog, SACCADE_THRESHOLD
from .integrator import integrate_rk4

__all__ = [
    'FieldLayout', 'Population', 'build_field_layout',
    'build_input_signal', 'build_stimulation_signal', 'sample_index',
    'RemapOperator',
    'TrialSession', 'SaccadeLog', 'SACCADE_THRESHOLD',
    'integrate_rk4',
]
