import random

import pytest

from src.schulte_trainer.domain import (
    GridConfig,
    InvalidConfig,
    OrderMode,
    expected_sequence,
    expected_value,
    find_position,
    format_time_short,
    generate_grid,
    is_permutation,
    parse_order,
    validate_config,
)


@pytest.mark.parametrize("size", [5, 6, 7])
def test_generate_grid_is_permutation(size):
    grid = generate_grid(size, random.Random(size))
    assert len(grid) == size
    assert all(len(row) == size for row in grid)
    flat = [v for row in grid for v in row]
    assert sorted(flat) == list(range(1, size * size + 1))
    assert is_permutation(grid)


@pytest.mark.parametrize("size", [4, 8, 0, -5, 5.0, "5", True, None])
def test_generate_grid_rejects_invalid_size(size):
    with pytest.raises(InvalidConfig):
        generate_grid(size)


def test_generate_grid_is_deterministic_for_same_seed():
    assert generate_grid(6, random.Random(42)) == generate_grid(6, random.Random(42))


def test_generate_grid_without_rng_shuffles():
    # 25! 通りの並べ替えのうち、3 回連続で同じになる確率は無視できる
    grids = [generate_grid(5) for _ in range(3)]
    assert not (grids[0] == grids[1] == grids[2])


def test_is_permutation_detects_duplicates_and_shape():
    assert not is_permutation([[1, 1], [3, 4]])
    assert not is_permutation([[1, 2, 3], [4]])
    assert is_permutation([[2, 1], [4, 3]])


def test_validate_config_normalizes_order():
    cfg = validate_config(GridConfig(size=5, max_time_seconds=60, order="desc"))  # type: ignore[arg-type]
    assert cfg.order is OrderMode.DESC


@pytest.mark.parametrize(
    "size,max_time,order",
    [
        (4, 60, "ASC"),
        (8, 60, "ASC"),
        (5, 29, "ASC"),
        (5, 301, "ASC"),
        (5, 60.5, "ASC"),
        (5, 60, "RANDOM"),
        (5, 60, None),
    ],
)
def test_validate_config_rejects(size, max_time, order):
    with pytest.raises(InvalidConfig):
        validate_config(GridConfig(size=size, max_time_seconds=max_time, order=order))


def test_validate_config_accepts_bounds():
    assert validate_config(GridConfig(size=7, max_time_seconds=30)).max_time_seconds == 30
    assert validate_config(GridConfig(size=5, max_time_seconds=300)).max_time_seconds == 300


def test_invalid_config_is_value_error():
    with pytest.raises(ValueError):
        parse_order("sideways")


def test_expected_sequence_asc_and_desc():
    asc = GridConfig(size=5, max_time_seconds=60, order=OrderMode.ASC)
    desc = GridConfig(size=5, max_time_seconds=60, order=OrderMode.DESC)
    assert expected_sequence(asc) == list(range(1, 26))
    assert expected_sequence(desc) == list(range(25, 0, -1))
    assert expected_value(desc, 0) == 25
    assert expected_value(desc, 24) == 1


def test_find_position():
    grid = [[3, 1], [4, 2]]
    assert find_position(grid, 4) == (1, 0)
    assert find_position(grid, 9) is None


@pytest.mark.parametrize(
    "seconds,expected",
    [
        (None, "--"),
        (0, "0.0s"),
        (12.34, "12.3s"),
        (62.5, "1:02.5"),
        (120, "2:00.0"),
        (-1, "0.0s"),
        (59.96, "1:00.0"),
        (119.97, "2:00.0"),
    ],
)
def test_format_time_short(seconds, expected):
    assert format_time_short(seconds) == expected
