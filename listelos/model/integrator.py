"""
Fixed-step fourth-order Runge-Kutta integration.

There is no adaptive step control. The step must be small enough for the
fastest time constant of the model; choosing it is the caller's job.
"""

import numpy as np
from tqdm import tqdm


def integrate_rk4(derivative, times, y0, show_progress=False):
    """
    Integrate ``dy/dt = derivative(t, y)`` over a fixed time grid.

    The derivative is evaluated at t, t + h/2 (twice) and t + h for every
    step, in increasing time order, so a derivative with side effects sees
    time move forward monotonically within and across steps.

    Args:
        derivative: Callable (t, y) -> dy/dt
        times: 1-D array of increasing sample times
        y0: Initial state vector
        show_progress: Whether to show progress bar

    Returns:
        np.ndarray (len(times), len(y0)); row 0 is ``y0``

    Example:
        >>> Y = integrate_rk4(lambda t, y: -y, np.linspace(0, 1, 101), np.ones(1))
    """
    times = np.asarray(times, dtype=float)
    y0 = np.asarray(y0, dtype=float)
    if times.ndim != 1 or times.size == 0:
        raise ValueError("times must be a non-empty 1-D array")
    if y0.ndim != 1:
        raise ValueError(f"y0 must be a 1-D state vector, got shape {y0.shape}")

    n_samples = times.size
    Y = np.zeros((n_samples, y0.size))
    Y[0] = y0

    # Setup progress bar if requested
    sim_iterator = range(n_samples - 1)
    if show_progress:
        sim_iterator = tqdm(sim_iterator, desc="Sim", leave=False, ncols=80)

    # Main integration loop
    for i in sim_iterator:
        t = times[i]
        h = times[i + 1] - t
        y = Y[i]

        k1 = derivative(t, y)
        k2 = derivative(t + 0.5 * h, y + 0.5 * h * k1)
        k3 = derivative(t + 0.5 * h, y + 0.5 * h * k2)
        k4 = derivative(t + h, y + h * k3)
        Y[i + 1] = y + (h / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)

    if show_progress and isinstance(sim_iterator, tqdm):
        sim_iterator.close()

    return Y
