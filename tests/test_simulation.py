import numpy as np
import pytest

from listelos import get_config, simulate_trial, saccade_latency, TIME_SCALE
from listelos.config.task_presets import get_task, latency_reference_time
from listelos.model.trial_session import SACCADE_THRESHOLD
from listelos.simulation import TrialResult, to_internal, to_seconds


def test_result_shapes():
    result = simulate_trial(duration=0.01)

    assert result.times.shape == (101,)
    assert result.trajectory.shape == (101, result.layout.total_size)
    assert result.times[-1] == pytest.approx(0.01)
    assert np.array_equal(result.trajectory[0], result.layout.initial_state())
    assert result.population('M').shape == (101, 81 * 4)
    assert result.layout_metadata()['PX'] == (81, 0.0, 0, 81)
    assert result.is_finite()


def test_no_cues_no_stimulation_is_quiescent():
    result = simulate_trial(cue_locations=[], cue_on_times=[], cue_off_times=[],
                            stim_strength=0.0)

    assert result.times[-1] == pytest.approx(2.0)

    assert result.saccade_times == []
    assert result.saccade_targets == []
    assert result.population('C').max() <= SACCADE_THRESHOLD
    assert not result.population('PX').any()
    assert not result.population('M').any()


def test_identical_seed_is_bit_identical():
    first = simulate_trial(duration=0.03, random_seed=7)
    second = simulate_trial(duration=0.03, random_seed=7)

    assert np.array_equal(first.trajectory, second.trajectory)
    assert first.saccade_times == second.saccade_times
    assert first.saccade_targets == second.saccade_targets


def test_input_delay():
    kwargs = dict(cue_locations=[41], cue_on_times=[0.0], cue_off_times=[1.0], duration=0.1)
    delayed = simulate_trial(**kwargs)
    immediate = simulate_trial(use_delay=False, **kwargs)

    # Delay is 0.05 s; sample 400 is t = 0.04 s
    assert delayed.population('PX')[400, 40] == 0.0
    assert delayed.population('PX')[900, 40] > 0.0
    assert immediate.population('PX')[400, 40] > 0.0


def test_config_errors_raised_before_integration():
    with pytest.raises(ValueError):
        simulate_trial(cue_locations=[41, 14], cue_on_times=[0.0], cue_off_times=[1.0, 2.0])
    with pytest.raises(ValueError):
        simulate_trial(fix_location=100)


def test_overrides_apply_to_given_config():
    cfg = get_config('saccade_gap0')
    result = simulate_trial(cfg, duration=0.01)
    assert result.times[-1] == pytest.approx(0.01)
    assert cfg.duration == 2.0


@pytest.mark.parametrize("seconds", [0.0, 0.0001, 0.1, 0.575, 1.9, 3.0])
def test_time_rescale_is_invertible(seconds):
    assert to_internal(seconds) == pytest.approx(seconds * TIME_SCALE)
    assert to_seconds(to_internal(seconds)) == pytest.approx(seconds)
    assert to_seconds(to_internal([seconds, 2 * seconds])) == pytest.approx([seconds, 2 * seconds])


def test_saccade_latency():
    result = TrialResult(layout=None, times=np.zeros(1), trajectory=np.zeros((1, 1)),
                         saccade_times=[0.6, 0.8, 0.9], saccade_targets=[14, 38, 14])

    assert saccade_latency(result, 38, 0.55) == pytest.approx(250.0)
    assert saccade_latency(result, 14, 0.5) == pytest.approx(100.0)
    assert saccade_latency(result, 20, 0.5) is None
    assert result.n_saccades == 3


def test_fixation_holds_while_fixation_point_lit():
    # Fixation point goes off at 1.05 s; every cue has come and gone by 0.65 s
    result = simulate_trial(get_config('immediate_serial_recall', duration=0.9))

    assert result.saccade_times == []
    assert "fixation broken" not in result.saccade_outcomes
    assert result.population('M').max() > 0.0


@pytest.mark.slow
def test_immediate_serial_recall():
    result = simulate_trial(get_config('immediate_serial_recall'))

    assert result.saccade_targets, "no saccades made"
    assert result.saccade_targets[0] == 38
    assert set(result.saccade_targets) <= {38, 14}
    assert all(t > 1.0 for t in result.saccade_times)
    assert len(result.saccade_times) == len(result.saccade_targets)


@pytest.mark.slow
def test_gap0_saccade_latency():
    task = get_task('saccade_gap0')
    result = simulate_trial(get_config('saccade_gap0'))

    assert 14 in result.saccade_targets
    first = result.saccade_targets.index(14)
    assert result.saccade_times[first] > 0.5

    latency = saccade_latency(result, 14, latency_reference_time(task))
    assert 0.0 < latency < 300.0


@pytest.mark.slow
def test_seed_changes_working_memory_noise():
    first = simulate_trial(duration=0.3, random_seed=1)
    second = simulate_trial(duration=0.3, random_seed=2)
    assert not np.array_equal(first.population('M'), second.population('M'))
