"""
Command-line runner for lisTELOS task presets.

Runs one trial of a pre-defined oculomotor task and prints the saccade log
and the latency of the first saccade to the task's target.

Usage:
    python -m listelos.run_task
    python -m listelos.run_task --task saccade_gap0
    python -m listelos.run_task --task histed_miller_stim --seed 3 --verbose
    python -m listelos.run_task --list-tasks
"""

import argparse
import time

from .config.trial_config import get_config
from .config.task_presets import get_task, list_tasks, latency_reference_time
from .simulation import simulate_trial, saccade_latency


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Run a lisTELOS task trial',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--task', type=str, default='immediate_serial_recall',
                        help='Pre-defined task name (e.g., saccade_gap0, overlap)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for the working memory noise')
    parser.add_argument('--duration', type=float, default=None,
                        help='Trial duration in seconds')
    parser.add_argument('--step', type=float, default=None,
                        help='Integration step in seconds')
    parser.add_argument('--verbose', action='store_true',
                        help='Print saccade events while simulating')
    parser.add_argument('--progress', action='store_true',
                        help='Show a progress bar')
    parser.add_argument('--list-tasks', action='store_true',
                        help='List available tasks and exit')

    return parser.parse_args(argv)


def setup_trial(args):
    """
    Build the trial configuration from command line arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        TrialConfig instance
    """
    overrides = {}
    if args.seed is not None:
        overrides['random_seed'] = args.seed
    if args.duration is not None:
        overrides['duration'] = args.duration
    if args.step is not None:
        overrides['step'] = args.step
    if args.verbose:
        overrides['verbose'] = True
    if args.progress:
        overrides['show_progress'] = True

    print(f"Using task: {args.task}")
    return get_config(args.task, **overrides)


def run_task(task_name, cfg):
    """
    Simulate one trial and print its saccades.

    Args:
        task_name: Task preset the config was built from
        cfg: TrialConfig instance

    Returns:
        TrialResult
    """
    task = get_task(task_name)
    start_time = time.time()

    print("\n" + "=" * 70)
    print(f"lisTELOS Task: {task_name}")
    print("=" * 70)
    print(f"{task.get('description', '')}")
    print(f"Cues: {cfg.cue_locations} | seed: {cfg.random_seed}")
    print("=" * 70)

    result = simulate_trial(cfg)

    print(f"\n=== Saccades ({result.n_saccades}) ===")
    for t, target, outcome in zip(result.saccade_times, result.saccade_targets, result.saccade_outcomes):
        line = f"  t={t:.4f} s -> location {target}"
        if outcome:
            line += f" ({outcome})"
        print(line)

    # Latency to the last cue that is not the fixation point
    targets = [loc for loc in cfg.cue_locations if loc != cfg.fix_location]
    if targets:
        reference = latency_reference_time(task)
        latency = saccade_latency(result, targets[-1], reference)
        if latency is None:
            print(f"\nNo saccade to location {targets[-1]}")
        else:
            print(f"\nLatency to location {targets[-1]}: {latency:.1f} ms")

    if result.messages and not cfg.verbose:
        print(f"\n{len(result.messages)} diagnostic messages (run with --verbose to see them)")
    if not result.is_finite():
        print("Warning: trajectory contains NaN or inf")

    total_time = time.time() - start_time
    print(f"\nSimulation time: {total_time:.1f} s")

    return result


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # List tasks if requested
    if args.list_tasks:
        list_tasks()
        return

    cfg = setup_trial(args)
    run_task(args.task, cfg)


if __name__ == "__main__":
    main()
