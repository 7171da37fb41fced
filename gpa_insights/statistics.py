"""
통계 계산 모듈

구간별 인원수(도수분포)로부터 집계, 가중평균, 추정 순위/백분위를 계산하는 기능을 제공합니다.
원자료가 아닌 구간 데이터만 사용하므로 모든 값은 근사치입니다.
"""

import math
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from gpa_insights.config import BIN_UPPER_EPSILON, DEFAULT_VALUE_RANGE
from gpa_insights.models import Aggregate, BinRange, RankInfo, SegmentDistribution


def aggregate_segments(segments: Sequence[SegmentDistribution], bin_count: int) -> Aggregate:
    """
    여러 행의 구간별 인원수와 합계를 합산합니다.

    Args:
        segments (Sequence[SegmentDistribution]): 합산할 행 목록
        bin_count (int): 구간 수

    Returns:
        Aggregate: 길이 bin_count 의 합산 인원수와 총원. 빈 입력이면 모두 0

    Examples:
        >>> agg = aggregate_segments(dataset.segments, len(dataset.bins))
        >>> agg.counts, agg.total
        ((1, 3, 4), 8)
    """
    counts = np.zeros(bin_count, dtype=np.int64)
    total = 0

    for segment in segments:
        width = min(bin_count, len(segment.counts))
        counts[:width] += np.asarray(segment.counts[:width], dtype=np.int64)
        total += segment.total

    return Aggregate(counts=tuple(int(c) for c in counts), total=int(total))


def weighted_average(counts: Sequence[int], bins: Sequence[BinRange]) -> Optional[float]:
    """
    구간 중앙값을 가중치로 한 평균을 계산합니다.

    평균 = Σ(인원수 × 구간 중앙값) / Σ인원수

    Args:
        counts (Sequence[int]): 구간별 인원수
        bins (Sequence[BinRange]): 구간 목록 (counts 와 같은 순서)

    Returns:
        Optional[float]: 가중평균. 인원이 0 명이면 None (0 이 아님)

    Examples:
        >>> weighted_average([10], [BinRange("3.0-4.0", 3.0, 4.0)])
        3.5
        >>> weighted_average([0, 0], bins) is None
        True
    """
    total = sum(counts)
    if total == 0:
        return None

    # 대응하는 구간이 없는 인원수는 분자에 기여하지 않음
    width = min(len(counts), len(bins))
    midpoints = np.array([b.midpoint for b in bins[:width]], dtype=float)
    weights = np.asarray(counts[:width], dtype=float)

    return float(np.dot(weights, midpoints) / total)


def value_bounds(bins: Sequence[BinRange]) -> tuple:
    """
    구간 전체의 (최솟값, 최댓값)을 반환합니다. 구간이 없으면 기본 범위.
    """
    if not bins:
        return DEFAULT_VALUE_RANGE
    return bins[0].min, bins[-1].max


def parse_value(raw_value) -> Optional[float]:
    """
    입력값을 실수로 변환합니다. 숫자로 해석할 수 없으면 None.

    Examples:
        >>> parse_value("3.85")
        3.85
        >>> parse_value("abc") is None
        True
    """
    value = pd.to_numeric(raw_value, errors='coerce')
    if pd.isna(value):
        return None
    return float(value)


def clamp_value(raw_value, bins: Sequence[BinRange]) -> float:
    """
    값을 구간 전체 범위 안으로 자릅니다. 숫자가 아니면 최하위 구간의 하한.
    """
    min_bound, max_bound = value_bounds(bins)
    value = parse_value(raw_value)
    if value is None:
        value = min_bound
    return min(max(value, min_bound), max_bound)


def locate_bin(value: float, bins: Sequence[BinRange]) -> int:
    """
    값이 속하는 구간의 인덱스를 찾습니다.

    마지막이 아닌 구간은 상한에 BIN_UPPER_EPSILON 을 더해 비교하므로,
    상한과 정확히 같은 값은 다음 구간이 아니라 그 구간에 속합니다.
    어느 구간에도 속하지 않으면 마지막 구간입니다.
    """
    last = len(bins) - 1
    for index, b in enumerate(bins):
        upper = b.max if index == last else b.max + BIN_UPPER_EPSILON
        if b.min <= value <= upper:
            return index
    return last


def compute_rank_info(
    segment: Optional[SegmentDistribution],
    bins: Sequence[BinRange],
    raw_value
) -> RankInfo:
    """
    행(학과·학년) 안에서 특정 값의 추정 순위와 백분위를 계산합니다.

    구간 안의 값이 균등하게 분포한다고 가정하고, 값이 속한 구간에서
    자신보다 높은 인원의 비율을 선형 보간으로 추정합니다.

    Args:
        segment (Optional[SegmentDistribution]): 대상 행
        bins (Sequence[BinRange]): 구간 목록 (오름차순)
        raw_value: 개인의 값. 숫자로 해석할 수 없으면 최하위 구간의 하한으로 간주

    Returns:
        RankInfo: rank(1 = 최상위, 실수 추정치), percentile(rank / total × 100).
            행이 없거나 총원이 0 이거나 구간이 없으면 둘 다 None

    Examples:
        >>> info = compute_rank_info(segment, bins, 2.5)  # counts [2, 3, 5]
        >>> info.rank, info.percentile
        (3.5, 35.0)
    """
    if segment is None or segment.total == 0 or len(bins) == 0:
        return RankInfo()

    value = clamp_value(raw_value, bins)

    bin_index = locate_bin(value, bins)

    def count_at(index: int) -> int:
        return segment.counts[index] if index < len(segment.counts) else 0

    higher_count = float(sum(count_at(j) for j in range(bin_index + 1, len(bins))))

    target = bins[bin_index]
    bin_count = count_at(bin_index)
    range_width = target.max - target.min
    effective_width = 1 if range_width <= 0 else range_width
    if bin_count == 0:
        fraction_above = 0.0
    else:
        fraction_above = max(0.0, min(1.0, (target.max - value) / effective_width))

    higher_count += bin_count * fraction_above

    rank = higher_count + 1
    percentile = rank / segment.total * 100

    return RankInfo(rank=rank, percentile=percentile)


def display_rank(info: RankInfo) -> tuple:
    """
    화면 표시용으로 순위를 반올림하고 백분위를 100 이하로 자릅니다.

    Returns:
        tuple: (반올림한 순위 또는 None, 백분위 또는 None)
    """
    rank = int(math.floor(info.rank + 0.5)) if info.rank is not None else None
    percentile = min(info.percentile, 100.0) if info.percentile is not None else None
    return rank, percentile
