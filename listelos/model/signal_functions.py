"""
Output signal functions of the lisTELOS populations.

Every signal function is a sigmoid (Hill) function of the rectified input,
x^n / (theta^n + x^n), so all of them map 0 to 0 and saturate at 1. The
half-saturation point and steepness differ per pathway.
"""

import numpy as np


def hill(x, theta, n):
    """Sigmoid signal x^n / (theta^n + x^n) of the rectified input."""
    xp = np.maximum(x, 0.0) ** n
    return xp / (theta ** n + xp)


def f(x):
    """SEF selection -> PFC working memory reset."""
    return hill(x, 0.25, 4)


def f1(x):
    """Parietal input layer output."""
    return hill(x, 0.2, 2)


def f2(x):
    """Interneuron inhibition and parietal output -> LIP.

    Half-saturates well below the sustained parietal response, so a lit
    fixation point drives LIP almost as hard as a fresh cue does and keeps
    winning the LIP competition while it stays on.
    """
    return hill(x, 0.1, 2)


def f3(x):
    """LIP and FEF plan recurrent excitation."""
    return hill(x, 0.5, 2)


def f4(x):
    """Working memory self-excitation and readout."""
    return hill(x, 0.25, 3)


def f5(x):
    """Parietal candidate -> working memory loading."""
    return hill(x, 0.1, 2)


def f6(x):
    """SEF habituative gate signals."""
    return hill(x, 0.2, 2)


def f7(x):
    """SEF lateral inhibition and LIP/FEF -> colliculus."""
    return hill(x, 0.3, 2)


def f8(x):
    """SEF selection -> SEF output."""
    return hill(x, 0.3, 2)


def f10(x):
    """FEF output -> colliculus basal ganglia loop."""
    return hill(x, 0.3, 2)


def g(x):
    """Threshold-linear SEF output -> FEF plan signal."""
    return np.maximum(x - 0.1, 0.0)


def sum_over_others(x):
    """For every element i, the sum of all elements except x[i]."""
    return np.sum(x) - x


def rectify(x):
    """Half-wave rectification max(x, 0)."""
    return np.maximum(x, 0.0)
