import numpy as np
import pytest

from listelos.model.field_layout import POPULATIONS, build_field_layout


@pytest.mark.parametrize("field_size,count_cells", [
    ((9, 9), 4), ((1, 1), 1), ((5, 3), 2), ((4, 7), 6),
])
def test_ranges_partition_state_vector(field_size, count_cells):
    layout = build_field_layout(field_size, count_cells)

    covered = np.zeros(layout.total_size, dtype=int)
    cursor = 0
    for name, (size, _, start, stop) in layout.as_dict().items():
        assert start == cursor
        assert stop - start == size
        covered[start:stop] += 1
        cursor = stop

    assert cursor == layout.total_size
    assert np.all(covered == 1)


def test_population_sizes():
    layout = build_field_layout((9, 9), 4)
    assert layout['PX'].size == 81
    assert layout['M'].size == 81 * 4
    assert layout['ZA'].size == 81 * 4
    assert layout['MD'].size == 1
    assert layout['R'].size == 1
    assert layout.total_size == 81 * (7 * 4 + 19) + 5


def test_order_matches_derivative_concatenation():
    layout = build_field_layout((9, 9), 4)
    assert layout.names == [name for name, _, _ in POPULATIONS]
    assert layout.names[0] == 'PX'
    assert layout.names[-1] == 'C'


def test_initial_state():
    layout = build_field_layout((3, 3), 2)
    y0 = layout.initial_state()

    assert np.all(layout.extract(y0, 'ZD') == 1.0)
    assert np.all(layout.extract(y0, 'BD') == -0.58)
    assert np.allclose(layout.extract(y0, 'GG'), 3.0 / 7.0)
    assert np.all(layout.extract(y0, 'GN') == 0.4894)
    assert layout.extract(y0, 'R')[0] == 1.0
    assert np.all(layout.extract(y0, 'C') == 0.0)


def test_extract_from_trajectory():
    layout = build_field_layout((3, 3), 2)
    trajectory = np.tile(np.arange(layout.total_size, dtype=float), (5, 1))

    pl = layout.extract(trajectory, 'PL')
    assert pl.shape == (5, 9)
    assert pl[0, 0] == layout['PL'].start


def test_pack_unpack():
    layout = build_field_layout((3, 3), 2)
    y = np.random.default_rng(1).random(layout.total_size)
    assert np.array_equal(layout.pack(layout.unpack(y)), y)

    values = layout.unpack(y)
    del values['FX']
    with pytest.raises(ValueError, match="FX"):
        layout.pack(values)


def test_unknown_population():
    layout = build_field_layout((3, 3), 2)
    with pytest.raises(ValueError, match="Unknown population"):
        layout.slice('XX')


@pytest.mark.parametrize("field_size,count_cells", [((0, 9), 4), ((9, -1), 4), ((9, 9), 0)])
def test_invalid_dimensions(field_size, count_cells):
    with pytest.raises(ValueError):
        build_field_layout(field_size, count_cells)
