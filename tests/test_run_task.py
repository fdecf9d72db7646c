from listelos.run_task import main, parse_args, setup_trial


def test_parse_args_defaults():
    args = parse_args([])
    assert args.task == 'immediate_serial_recall'
    assert args.seed is None
    assert not args.verbose


def test_setup_trial_overrides(capsys):
    cfg = setup_trial(parse_args(['--task', 'overlap', '--seed', '7', '--duration', '0.5']))
    assert cfg.random_seed == 7
    assert cfg.duration == 0.5
    assert cfg.cue_off_times == [1.0, 1.5]
    assert "overlap" in capsys.readouterr().out


def test_list_tasks(capsys):
    main(['--list-tasks'])
    assert 'saccade_gap0' in capsys.readouterr().out


def test_short_run_reports_missing_saccade(capsys):
    main(['--task', 'saccade_gap0', '--duration', '0.01'])
    out = capsys.readouterr().out
    assert "Saccades (0)" in out
    assert "No saccade to location 14" in out
