"""
Visual cue and microstimulation signals.

Both signals are precomputed once per trial on the integration grid, the
same way spike inputs are precomputed before a network simulation, so the
derivative function only has to look up a sample.
"""

import numpy as np
from scipy.signal.windows import gaussian


def sample_index(t: float, step: float) -> int:
    """
    Index of the last grid sample at or before time ``t``.

    Grid-aligned times map to their own sample despite floating point error
    in ``t / step``.
    """
    return int(np.floor(t / step + 1e-9))


def build_input_signal(n_steps, step, n_cells, cue_locations, cue_on_times, cue_off_times):
    """
    Construct the visual input through time.

    Args:
        n_steps: Number of integration steps
        step: Integration step (internal time units)
        n_cells: Number of cells in a field
        cue_locations: Field index (1-based) of each cue
        cue_on_times: Onset of each cue (internal time units)
        cue_off_times: Offset of each cue (internal time units)

    Returns:
        np.ndarray (n_steps + 1, n_cells) of 0/1. Row ``k`` holds the cues
        visible at sample ``k``; a cue is on from its onset sample through its
        offset sample inclusive.
    """
    if not (len(cue_locations) == len(cue_on_times) == len(cue_off_times)):
        raise ValueError("cue_locations, cue_on_times and cue_off_times must have the same length")

    signal = np.zeros((n_steps + 1, n_cells))
    for loc, on, off in zip(cue_locations, cue_on_times, cue_off_times):
        first = max(sample_index(on, step), 0)
        last = min(sample_index(off, step), n_steps)
        if first > last:
            continue  # empty interval
        signal[first:last + 1, int(loc) - 1] = 1.0
    return signal


def stimulation_kernel(field_size, location, spread, strength):
    """
    Gaussian stimulation profile over one field, peaking at ``location``.

    A Gaussian of side 3 * max(width, height) is normalised to a peak of 1
    and a width x height window is cut out of it so that the peak falls on
    the stimulation site. The side guarantees the window fits for any site.

    Returns:
        np.ndarray (n_cells,) flattened column-major, matching field indices
    """
    width, height = int(field_size[0]), int(field_size[1])
    side = 3 * max(width, height)
    centre = side // 2

    # Odd length so the peak sits on sample ``centre``
    profile = gaussian(2 * centre + 1, std=spread)
    kernel = np.outer(profile, profile)
    kernel = kernel / kernel.max()

    row = (int(location) - 1) % height
    col = (int(location) - 1) // height
    r0 = centre - row
    c0 = centre - col
    window = kernel[r0:r0 + height, c0:c0 + width]
    assert window.shape == (height, width)

    return window.flatten(order='F') * strength


def build_stimulation_signal(n_steps, step, field_size, count_cells, location,
                             on_time, off_time, spread, strength):
    """
    Construct microstimulation through time.

    Args:
        n_steps: Number of integration steps
        step: Integration step (internal time units)
        field_size: (width, height) of each field
        count_cells: Number of rank slots the stimulation is replicated over
        location: Stimulation site (1-based field index)
        on_time: Stimulation onset (internal time units)
        off_time: Stimulation offset (internal time units)
        spread: Standard deviation of the Gaussian (cells)
        strength: Peak strength

    Returns:
        np.ndarray (n_cells * count_cells, n_steps + 1). Column ``k`` is the
        stimulation at sample ``k``; identical across rank slots.
    """
    kernel = stimulation_kernel(field_size, location, spread, strength)
    n_cells = kernel.size

    stim = np.zeros((n_cells, n_steps + 1))
    first = max(sample_index(on_time, step), 0)
    last = min(sample_index(off_time, step), n_steps)
    if first <= last:
        stim[:, first:last + 1] = kernel[:, None]

    return np.tile(stim, (count_cells, 1))
