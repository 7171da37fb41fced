"""
분포 데이터 모델

CSV 한 장에서 파싱된 구간(BinRange), 학과·학년 행(SegmentDistribution),
전체 표(DistributionDataset)와 이로부터 파생되는 집계/순위 결과를 정의합니다.
모든 객체는 생성 후 변경되지 않습니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class BinRange:
    """
    도수분포표의 한 열에 해당하는 수치 구간.

    Attributes:
        label (str): 원본 라벨 (예: "3.0-3.5")
        min (float): 하한
        max (float): 상한
    """
    label: str
    min: float
    max: float

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f"구간 하한이 상한보다 큽니다: {self.label}")

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class SegmentDistribution:
    """
    학과·학년 한 행의 구간별 인원수.

    grade 가 0 이면 학년 표기가 없는 행(집계 행 등)입니다.
    """
    major: str
    grade: int
    label: str
    counts: Tuple[int, ...]
    total: int

    def __post_init__(self):
        object.__setattr__(self, "counts", tuple(self.counts))
        if self.total != sum(self.counts):
            raise ValueError(
                f"'{self.label}' 행의 합계({self.total})가 인원수 합({sum(self.counts)})과 다릅니다."
            )


@dataclass(frozen=True)
class DistributionDataset:
    """파싱된 도수분포표 전체 (구간 목록 + 행 목록)."""
    bins: Tuple[BinRange, ...] = ()
    segments: Tuple[SegmentDistribution, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "bins", tuple(self.bins))
        object.__setattr__(self, "segments", tuple(self.segments))
        for segment in self.segments:
            if len(segment.counts) != len(self.bins):
                raise ValueError(
                    f"'{segment.label}' 행의 열 수({len(segment.counts)})가 "
                    f"구간 수({len(self.bins)})와 다릅니다."
                )

    @property
    def is_empty(self) -> bool:
        return not self.bins and not self.segments


@dataclass(frozen=True)
class Aggregate:
    """여러 행을 구간별로 합산한 결과."""
    counts: Tuple[int, ...] = field(default_factory=tuple)
    total: int = 0


@dataclass(frozen=True)
class RankInfo:
    """
    추정 순위와 백분위.

    데이터가 없으면 두 값 모두 None 입니다. 값은 반올림하지 않은 실수 추정치입니다.
    """
    rank: Optional[float] = None
    percentile: Optional[float] = None


EMPTY_DATASET = DistributionDataset()
