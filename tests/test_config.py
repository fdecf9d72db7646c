import pytest

from listelos.config import (
    TASKS, TrialConfig, get_config, get_task, latency_reference_time, list_tasks,
)


def test_defaults():
    cfg = TrialConfig()
    assert cfg.step == 0.0001
    assert cfg.duration == 2.0
    assert cfg.field_size == (9, 9)
    assert cfg.n_cells == 81
    assert cfg.n_steps == 20000
    assert cfg.cue_locations == [41, 38, 14, 38]
    assert cfg.fixation_cue_indices == [0]
    assert cfg.n_target_cues == 3
    cfg.validate()


def test_default_lists_not_shared():
    a, b = TrialConfig(), TrialConfig()
    a.cue_locations.append(5)
    assert b.cue_locations == [41, 38, 14, 38]


def test_get_config_overrides():
    cfg = get_config(duration=1.0, use_wm=False)
    assert cfg.duration == 1.0
    assert cfg.use_wm is False


def test_get_config_from_task():
    cfg = get_config('saccade_gap0', random_seed=3)
    assert cfg.use_wm is False
    assert cfg.cue_locations == [41, 14]
    assert cfg.stim_strength == 0.0
    assert cfg.random_seed == 3
    cfg.validate()


@pytest.mark.parametrize("key", ["not_a_param", "n_cells", "description"])
def test_get_config_rejects_unknown_keys(key):
    with pytest.raises(ValueError, match="Unknown config parameter"):
        get_config(**{key: 1})


@pytest.mark.parametrize("overrides", [
    dict(step=0.0),
    dict(duration=-1.0),
    dict(step=3.0),
    dict(field_size=(9,)),
    dict(field_size=(0, 9)),
    dict(count_cells=0),
    dict(cue_on_times=[0.0, 0.1]),
    dict(cue_off_times=[1.0]),
    dict(fix_location=82),
    dict(stim_location=0),
    dict(cue_locations=[41, 38, 90, 38]),
    dict(count_cells=2),
    dict(stim_spread=0.0),
])
def test_validate_rejects(overrides):
    with pytest.raises(ValueError):
        get_config(**overrides).validate()


@pytest.mark.parametrize("name", list(TASKS))
def test_every_task_is_valid(name):
    get_config(name).validate()
    assert 'description' in TASKS[name]


def test_get_task_returns_copy():
    task = get_task('immediate_serial_recall')
    task['cue_locations'].append(1)
    assert TASKS['immediate_serial_recall']['cue_locations'] == [41, 38, 14, 38]


def test_unknown_task():
    with pytest.raises(ValueError, match="Unknown task"):
        get_task('antisaccade')


def test_latency_reference_time():
    assert latency_reference_time(get_task('saccade_gap0')) == 0.5
    assert latency_reference_time(get_task('gap500')) == 1.0
    assert latency_reference_time(get_task('yang_ipsilateral_late_stim')) == 0.5


def test_list_tasks(capsys):
    list_tasks()
    out = capsys.readouterr().out
    for name in TASKS:
        assert name in out
