"""
통계 계산 모듈 테스트
"""

import math

import pytest

from gpa_insights.models import Aggregate, BinRange, RankInfo, SegmentDistribution
from gpa_insights.statistics import (
    aggregate_segments,
    clamp_value,
    compute_rank_info,
    display_rank,
    locate_bin,
    parse_value,
    value_bounds,
    weighted_average,
)


BINS = (
    BinRange("0-1", 0.0, 1.0),
    BinRange("1-2", 1.0, 2.0),
    BinRange("2-3", 2.0, 3.0),
)


def make_segment(counts, major="CS", grade=1):
    return SegmentDistribution(
        major=major,
        grade=grade,
        label=f"{major} {grade}回生",
        counts=tuple(counts),
        total=sum(counts),
    )


class TestAggregate:
    """행 집계 테스트"""

    def test_sum_counts_and_totals(self):
        a = make_segment([1, 2, 3], grade=1)
        b = make_segment([0, 1, 1], grade=2)

        result = aggregate_segments([a, b], 3)

        assert result == Aggregate(counts=(1, 3, 4), total=8)

    def test_empty_input(self):
        """빈 입력이면 모두 0"""
        result = aggregate_segments([], 4)
        assert result.counts == (0, 0, 0, 0)
        assert result.total == 0

    def test_order_independent(self):
        a = make_segment([1, 0, 2], grade=1)
        b = make_segment([4, 4, 0], grade=2)
        c = make_segment([0, 3, 7], grade=3)

        assert aggregate_segments([a, b, c], 3) == aggregate_segments([c, a, b], 3)

    def test_partition_merge_equals_direct(self):
        """[A,B] 집계 후 [C] 와 합친 결과 == [A,B,C] 직접 집계"""
        a = make_segment([1, 0, 2], grade=1)
        b = make_segment([4, 4, 0], grade=2)
        c = make_segment([0, 3, 7], grade=3)

        partial = aggregate_segments([a, b], 3)
        rest = aggregate_segments([c], 3)
        merged = Aggregate(
            counts=tuple(x + y for x, y in zip(partial.counts, rest.counts)),
            total=partial.total + rest.total,
        )

        assert merged == aggregate_segments([a, b, c], 3)

    def test_returns_plain_ints(self):
        result = aggregate_segments([make_segment([1, 2, 3])], 3)
        assert all(type(c) is int for c in result.counts)
        assert type(result.total) is int


class TestWeightedAverage:
    """가중평균 테스트"""

    def test_single_bin(self):
        assert weighted_average([10], [BinRange("3.0-4.0", 3.0, 4.0)]) == pytest.approx(3.5)

    def test_all_zero_is_none(self):
        """인원이 없으면 0 이 아니라 None"""
        assert weighted_average([0, 0, 0], BINS) is None
        assert weighted_average([], []) is None

    def test_end_to_end_aggregate(self):
        # (1×0.5 + 3×1.5 + 4×2.5) / 8
        assert weighted_average([1, 3, 4], BINS) == pytest.approx(1.875)

    def test_count_without_bin_contributes_only_to_total(self):
        """대응 구간이 없는 인원수는 분자에 기여하지 않음"""
        result = weighted_average([2, 2], [BinRange("0-1", 0.0, 1.0)])
        assert result == pytest.approx(0.25)

    def test_bin_without_count(self):
        assert weighted_average([4], BINS) == pytest.approx(0.5)


class TestLocateBin:
    """구간 탐색 테스트"""

    def test_boundary_value_stays_in_lower_bin(self):
        """마지막이 아닌 구간의 상한값은 그 구간에 속함"""
        assert locate_bin(1.0, BINS) == 0
        assert locate_bin(2.0, BINS) == 1

    def test_top_bin_closed_at_max(self):
        assert locate_bin(3.0, BINS) == 2

    def test_epsilon_gap_between_bins(self):
        bins = (BinRange("0.0-0.9", 0.0, 0.9), BinRange("1.0-2.0", 1.0, 2.0))
        assert locate_bin(0.90005, bins) == 0

    def test_no_match_falls_back_to_last(self):
        bins = (BinRange("0.0-0.5", 0.0, 0.5), BinRange("1.0-2.0", 1.0, 2.0))
        assert locate_bin(0.7, bins) == 1

    def test_value_bounds(self):
        assert value_bounds(BINS) == (0.0, 3.0)
        assert value_bounds(()) == (0.0, 5.0)


class TestParseValue:
    """입력값 변환 테스트"""

    def test_numeric_strings(self):
        assert parse_value("3.85") == pytest.approx(3.85)
        assert parse_value(2) == 2.0

    @pytest.mark.parametrize("raw_value", ["abc", "nan", "", None])
    def test_not_a_number(self, raw_value):
        """숫자가 아니면 None"""
        assert parse_value(raw_value) is None

    def test_clamp_into_bounds(self):
        assert clamp_value(9.9, BINS) == 3.0
        assert clamp_value(-1, BINS) == 0.0
        assert clamp_value("1.5", BINS) == pytest.approx(1.5)

    @pytest.mark.parametrize("raw_value", ["abc", "nan"])
    def test_clamp_non_numeric_to_lowest_bin(self, raw_value):
        """숫자가 아니면 최하위 구간의 하한, 최상위 구간으로 가지 않음"""
        assert clamp_value(raw_value, BINS) == 0.0
        assert locate_bin(clamp_value(raw_value, BINS), BINS) == 0


class TestComputeRankInfo:
    """순위/백분위 추정 테스트"""

    def test_midpoint_of_top_bin(self):
        segment = make_segment([2, 3, 5])

        info = compute_rank_info(segment, BINS, 2.5)

        assert info.rank == pytest.approx(3.5)
        assert info.percentile == pytest.approx(35.0)

    def test_top_value_is_rank_one(self):
        info = compute_rank_info(make_segment([2, 3, 5]), BINS, 3.0)
        assert info.rank == pytest.approx(1.0)
        assert info.percentile == pytest.approx(10.0)

    def test_boundary_value_counts_whole_upper_bins(self):
        """상한값(1.0)은 첫 구간에 속하고 위 구간 인원은 모두 상위"""
        info = compute_rank_info(make_segment([2, 3, 5]), BINS, 1.0)
        assert info.rank == pytest.approx(9.0)

    def test_value_below_range_clamps_to_lowest_bin(self):
        segment = make_segment([2, 3, 5])
        below = compute_rank_info(segment, BINS, -4.0)
        at_min = compute_rank_info(segment, BINS, 0.0)

        assert below == at_min
        assert below.rank == pytest.approx(11.0)
        assert below.percentile == pytest.approx(110.0)

    def test_value_above_range_clamps_to_max(self):
        segment = make_segment([2, 3, 5])
        assert compute_rank_info(segment, BINS, 9.9) == compute_rank_info(segment, BINS, 3.0)

    @pytest.mark.parametrize("raw_value", [None, float("nan"), "", "abc"])
    def test_invalid_value_uses_lowest_min(self, raw_value):
        segment = make_segment([2, 3, 5])
        assert compute_rank_info(segment, BINS, raw_value) == compute_rank_info(segment, BINS, 0.0)

    def test_numeric_string_value(self):
        segment = make_segment([2, 3, 5])
        assert compute_rank_info(segment, BINS, "2.5").rank == pytest.approx(3.5)

    def test_empty_bin_contributes_nothing(self):
        """값이 속한 구간의 인원이 0 이면 구간 내 비율은 무시"""
        info = compute_rank_info(make_segment([4, 0, 6]), BINS, 1.5)
        assert info.rank == pytest.approx(7.0)

    def test_zero_width_bin(self):
        bins = (BinRange("0-1", 0.0, 1.0), BinRange("2-2", 2.0, 2.0))
        segment = SegmentDistribution("CS", 1, "CS 1回生", (3, 4), 7)
        info = compute_rank_info(segment, bins, 2.0)
        assert info.rank == pytest.approx(1.0)

    @pytest.mark.parametrize("segment, bins", [
        (None, BINS),
        (SegmentDistribution("CS", 1, "CS 1回生", (0, 0, 0), 0), BINS),
        (SegmentDistribution("CS", 1, "CS 1回生", (), 0), ()),
    ])
    def test_no_data(self, segment, bins):
        assert compute_rank_info(segment, bins, 2.0) == RankInfo(rank=None, percentile=None)


class TestDisplayRank:
    """표시용 변환 테스트"""

    def test_rounding_and_clamp(self):
        assert display_rank(RankInfo(rank=3.5, percentile=35.0)) == (4, 35.0)
        assert display_rank(RankInfo(rank=2.49, percentile=100.4)) == (2, 100.0)

    def test_none(self):
        assert display_rank(RankInfo()) == (None, None)

    def test_rank_is_int(self):
        rank, _ = display_rank(RankInfo(rank=7.2, percentile=10.0))
        assert isinstance(rank, int)
        assert not math.isnan(rank)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
