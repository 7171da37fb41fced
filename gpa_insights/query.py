"""
조회 모듈

선택한 데이터셋·학과·학년에 맞는 행을 찾고, 집계와 통계 계산을 묶어 제공합니다.
결과는 캐시하지 않고 조회할 때마다 다시 계산합니다.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from gpa_insights.config import GRADE_SUFFIX
from gpa_insights.models import (
    Aggregate,
    DistributionDataset,
    RankInfo,
    SegmentDistribution,
)
from gpa_insights.statistics import aggregate_segments, compute_rank_info, weighted_average


@dataclass(frozen=True)
class SelectionSummary:
    """학과·학년 선택 한 번에 대한 조회 결과."""
    segment: Optional[SegmentDistribution]
    grade_average: Optional[float]
    major_aggregate: Aggregate
    major_average: Optional[float]
    overall_aggregate: Aggregate
    overall_average: Optional[float]
    rank_info: RankInfo


def find_segment(
    segments: Sequence[SegmentDistribution],
    major: str,
    grade: int
) -> Optional[SegmentDistribution]:
    """
    학과와 학년이 정확히 일치하는 행을 찾습니다. (대소문자 구분, 부분 일치 없음)

    Returns:
        Optional[SegmentDistribution]: 일치하는 행 또는 None
    """
    for segment in segments:
        if segment.major == major and segment.grade == grade:
            return segment
    return None


def segments_for_major(
    segments: Sequence[SegmentDistribution],
    major: str
) -> List[SegmentDistribution]:
    return [segment for segment in segments if segment.major == major]


def list_majors(segments: Sequence[SegmentDistribution]) -> List[str]:
    """행 순서대로 중복 없는 학과 목록을 반환합니다."""
    return list(dict.fromkeys(segment.major for segment in segments))


def available_grades(segments: Sequence[SegmentDistribution], major: str) -> List[int]:
    """
    학과에 존재하는 학년 목록 (오름차순, 학년 표기 없는 행 제외).

    Examples:
        >>> available_grades(dataset.segments, "CS")
        [1, 2]
    """
    if not major:
        return []
    grades = {segment.grade for segment in segments_for_major(segments, major) if segment.grade > 0}
    return sorted(grades)


def summarize_selection(
    dataset: DistributionDataset,
    major: str,
    grade: Optional[int],
    value=None
) -> SelectionSummary:
    """
    선택한 학과·학년에 대한 평균(학년/학과/전체)과 추정 순위를 계산합니다.

    Args:
        dataset (DistributionDataset): 대상 데이터셋
        major (str): 학과명. 비어 있으면 학과 집계는 모두 0
        grade (Optional[int]): 학년. None 이면 행을 선택하지 않음
        value: 개인의 값 (예: GPA). 숫자로 해석할 수 없으면 최하위 구간 하한

    Returns:
        SelectionSummary: 조회 결과
    """
    bins = dataset.bins
    segments = dataset.segments
    bin_count = len(bins)

    segment = None
    if major and grade is not None:
        segment = find_segment(segments, major, grade)

    if major:
        major_aggregate = aggregate_segments(segments_for_major(segments, major), bin_count)
    else:
        major_aggregate = Aggregate(counts=(0,) * bin_count, total=0)

    overall_aggregate = aggregate_segments(segments, bin_count)

    return SelectionSummary(
        segment=segment,
        grade_average=weighted_average(segment.counts, bins) if segment is not None else None,
        major_aggregate=major_aggregate,
        major_average=weighted_average(major_aggregate.counts, bins),
        overall_aggregate=overall_aggregate,
        overall_average=weighted_average(overall_aggregate.counts, bins),
        rank_info=compute_rank_info(segment, bins, value),
    )


def segment_display_label(
    segment: Optional[SegmentDistribution],
    major: str = '',
    grade_suffix: str = GRADE_SUFFIX
) -> str:
    """
    차트 범례 등에 쓰는 라벨.

    Examples:
        >>> segment_display_label(segment)       # "CS 1回生"
        >>> segment_display_label(None, "CS")    # "CS（全学年）"
    """
    if segment is not None:
        return f"{segment.major} {segment.grade}{grade_suffix}"
    if major:
        return f"{major}（全学年）"
    return "分布"
