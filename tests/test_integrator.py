import numpy as np
import pytest

from listelos.model.integrator import integrate_rk4


def test_exponential_decay_accuracy():
    times = np.linspace(0.0, 1.0, 101)
    Y = integrate_rk4(lambda t, y: -y, times, np.array([1.0, 2.0]))

    assert Y.shape == (101, 2)
    assert np.allclose(Y[:, 0], np.exp(-times), atol=1e-9)
    assert np.allclose(Y[:, 1], 2 * np.exp(-times), atol=1e-9)


def test_first_row_is_initial_state():
    y0 = np.array([0.3, -0.58, 1.0])
    Y = integrate_rk4(lambda t, y: np.ones_like(y), np.linspace(0, 1, 11), y0)
    assert np.array_equal(Y[0], y0)


def test_exact_for_cubic_in_time():
    times = np.linspace(0.0, 2.0, 21)
    Y = integrate_rk4(lambda t, y: np.array([3 * t ** 2]), times, np.zeros(1))
    assert np.allclose(Y[:, 0], times ** 3, atol=1e-12)


def test_stage_times_are_non_decreasing():
    calls = []

    def derivative(t, y):
        calls.append(t)
        return np.zeros_like(y)

    times = np.arange(6) * 0.1
    integrate_rk4(derivative, times, np.zeros(2))

    assert len(calls) == 4 * 5
    assert np.all(np.diff(calls) >= 0)
    assert calls[:4] == pytest.approx([0.0, 0.05, 0.05, 0.1])


def test_single_sample_returns_initial_state():
    Y = integrate_rk4(lambda t, y: -y, np.array([0.0]), np.ones(3))
    assert Y.shape == (1, 3)


def test_progress_bar(capsys):
    Y = integrate_rk4(lambda t, y: -y, np.linspace(0, 1, 11), np.ones(1), show_progress=True)
    assert Y.shape == (11, 1)


def test_invalid_inputs():
    with pytest.raises(ValueError):
        integrate_rk4(lambda t, y: y, np.array([]), np.ones(1))
    with pytest.raises(ValueError):
        integrate_rk4(lambda t, y: y, np.linspace(0, 1, 3), np.ones((2, 2)))
