"""Tests for local-maximum search and distance-based peak selection."""

from __future__ import annotations

import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

from spikeslayer import XYPoint, select_by_distance
from spikeslayer._selection import local_maxima


def _points(values, xs=None):
    xs = range(len(values)) if xs is None else xs
    return [XYPoint(x=x, y=float(v), index=i) for i, (x, v) in enumerate(zip(xs, values))]


class TestLocalMaxima:
    """Neighbour-based maxima on the Y series."""

    def test_two_peaks(self, two_peak_series):
        peaks = local_maxima(_points(two_peak_series))
        assert [p.index for p in peaks] == [2, 7]

    def test_returns_same_objects(self, two_peak_series):
        points = _points(two_peak_series)
        assert all(any(p is q for q in points) for p in local_maxima(points))

    def test_edges_are_never_peaks(self):
        assert local_maxima(_points([9, 1, 9])) == []

    def test_plateau_reported_once(self):
        peaks = local_maxima(_points([0, 4, 4, 4, 0]))
        assert [p.index for p in peaks] == [2]

    def test_min_height(self, two_peak_series):
        peaks = local_maxima(_points(two_peak_series), min_height=5.5)
        assert [p.index for p in peaks] == [7]

    def test_short_input(self):
        assert local_maxima([]) == []
        assert local_maxima(_points([1, 2])) == []

    def test_nan_is_not_a_peak(self):
        peaks = local_maxima(_points([0, np.nan, 0, 3, 0]))
        assert [p.index for p in peaks] == [3]

    def test_monotonic_rise_has_no_peak(self):
        assert local_maxima(_points(range(20))) == []


class TestSelectByDistance:
    """A peak survives when it dominates its min_distance neighbourhood."""

    def test_zero_distance_keeps_all(self):
        peaks = _points([5, 6, 7])
        assert select_by_distance(peaks, 0) == peaks

    def test_stronger_peak_wins_conflict(self):
        peaks = [XYPoint(2, 5.0, 2), XYPoint(7, 6.0, 7), XYPoint(40, 1.0, 40)]
        assert [p.index for p in select_by_distance(peaks, 30)] == [7, 40]

    def test_tie_prefers_earlier_index(self):
        peaks = [XYPoint(0, 3.0, 0), XYPoint(5, 3.0, 5)]
        assert [p.index for p in select_by_distance(peaks, 10)] == [0]

    def test_distance_uses_x_values(self):
        # indices are adjacent, X values are far apart
        peaks = [XYPoint(0.0, 1.0, 0), XYPoint(100.0, 2.0, 1)]
        assert select_by_distance(peaks, 50) == peaks

    def test_output_in_input_order(self):
        peaks = _points([1, 9, 2, 8, 3], xs=[0, 10, 20, 30, 40])
        selected = select_by_distance(peaks, 15)
        indices = [p.index for p in selected]
        assert indices == sorted(indices)

    def test_empty(self):
        assert select_by_distance([], 10) == []

    def test_suppressed_peak_still_suppresses_neighbours(self):
        # 6 loses to 7 and still outranks 5, so only 7 survives
        peaks = _points([5, 6, 7], xs=[0, 2, 4])
        assert [p.x for p in select_by_distance(peaks, 3)] == [4]

    def test_unordered_x_values(self):
        peaks = _points([2, 9, 4], xs=[50, 10, 52])
        assert [p.index for p in select_by_distance(peaks, 5)] == [1, 2]


class TestHypothesis:
    """Selected peaks always honour the minimum distance."""

    @given(
        ys=st.lists(st.floats(min_value=0, max_value=100, allow_nan=False), min_size=1, max_size=60),
        distance=st.integers(min_value=1, max_value=20),
    )
    @settings(max_examples=100, deadline=None)
    def test_min_distance_always_honoured(self, ys, distance):
        selected = select_by_distance(_points(ys), distance)
        xs = [p.x for p in selected]
        assert all(b - a >= distance for a, b in zip(xs, xs[1:]))
        assert len(selected) >= 1

    @given(
        ys=st.lists(st.floats(min_value=0, max_value=100, allow_nan=False), min_size=1, max_size=40),
        tail=st.lists(st.floats(min_value=0, max_value=100, allow_nan=False), max_size=20),
        distance=st.integers(min_value=1, max_value=10),
    )
    @settings(max_examples=100, deadline=None)
    def test_decision_depends_only_on_neighbourhood(self, ys, tail, distance):
        head = _points(ys)
        # peaks appended at least min_distance past the last X
        far = [
            XYPoint(x=len(ys) - 1 + distance + i, y=y, index=len(ys) + i)
            for i, y in enumerate(tail)
        ]
        selected = select_by_distance(head + far, distance)
        assert [p for p in selected if p.index < len(ys)] == select_by_distance(head, distance)
