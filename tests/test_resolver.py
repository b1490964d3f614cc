"""Tests for the stored-value resolver."""

import math

import pytest

from json_connector.exporter.resolver import StoredValueResolver
from json_connector.model import DimensionSample

NOW = 1690000000


def _dim(points):
    return DimensionSample(id="user", name="user", points=points)


def test_average_over_window():
    resolver = StoredValueResolver("average", update_every=10)
    dim = _dim([(NOW - 20, 100.0), (NOW - 8, 1.0), (NOW - 4, 2.0), (NOW, 3.0)])
    value, timestamp = resolver(dim, NOW)
    assert value == pytest.approx(2.0)
    assert timestamp == NOW


def test_sum_over_window():
    resolver = StoredValueResolver("sum", update_every=10)
    dim = _dim([(NOW - 10, 50.0), (NOW - 5, 1.5), (NOW, 2.5)])
    assert resolver(dim, NOW).value == pytest.approx(4.0)


def test_gaps_are_ignored():
    resolver = StoredValueResolver("average", update_every=10)
    dim = _dim([(NOW - 5, math.nan), (NOW, 6.0)])
    assert resolver(dim, NOW).value == pytest.approx(6.0)


def test_no_points_is_nan():
    resolver = StoredValueResolver("average", update_every=10)
    assert math.isnan(resolver(_dim([]), NOW).value)
    assert math.isnan(resolver(_dim([(NOW - 30, 1.0)]), NOW).value)
    assert math.isnan(resolver(_dim([(NOW, math.nan)]), NOW).value)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        StoredValueResolver("median")
    with pytest.raises(ValueError):
        StoredValueResolver("sum", update_every=0)
