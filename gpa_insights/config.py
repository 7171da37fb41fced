from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# 번들 CSV 위치 (환경변수로 교체 가능)
DATA_DIR = Path(os.getenv("GPA_INSIGHTS_DATA_DIR", "").strip() or PROJECT_ROOT / "data")

CSV_ENCODING = "utf-8"

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "GPA Insights Dashboard"
APP_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

# 행 라벨 끝의 학년 표기 ("情報工学 2回生" -> 2)
GRADE_SUFFIX = os.getenv("GPA_INSIGHTS_GRADE_SUFFIX", "回生").strip() or "回生"

# 인접 구간 경계의 부동소수점 오차 보정값
BIN_UPPER_EPSILON = 0.0001

# 학과명 정렬 기준 로케일
DEFAULT_LOCALE = "ja"

# 구간이 하나도 없을 때 화면에 표시할 값 범위
DEFAULT_VALUE_RANGE = (0.0, 5.0)

# ---------------------------------------------------------------------------
# Dataset catalogue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatasetOption:
    key: str
    label: str
    filename: str

    @property
    def path(self) -> Path:
        return DATA_DIR / self.filename


DATASET_OPTIONS = (
    DatasetOption(key="current", label="今学期データ", filename="current-students.csv"),
    DatasetOption(key="cumulative", label="累計データ", filename="cumulative-students.csv"),
)


def get_dataset_option(key: str) -> DatasetOption:
    """키에 해당하는 데이터셋 옵션을 반환합니다. 없으면 첫 번째 옵션."""
    for option in DATASET_OPTIONS:
        if option.key == key:
            return option
    return DATASET_OPTIONS[0]
