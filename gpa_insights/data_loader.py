"""
데이터 로더 모듈

학교에서 제공하는 GPA 도수분포 CSV(학과·학년 × GPA 구간)를 파싱하는 기능을 제공합니다.

CSV 형식:
    - 첫 행: ``<무시되는 열>,<구간 라벨1>,<구간 라벨2>,...``
    - 데이터 행: ``<행 라벨>,<인원수1>,<인원수2>,...``
    - 쉼표 하나로만 구분하며 따옴표/이스케이프는 지원하지 않습니다.
      (라벨이나 셀 안에 쉼표를 넣을 수 없습니다.)
"""

import logging
import re
import unicodedata
from typing import List, Optional, Tuple

import pandas as pd

from gpa_insights.config import CSV_ENCODING, DATASET_OPTIONS, GRADE_SUFFIX, DatasetOption
from gpa_insights.models import BinRange, DistributionDataset, SegmentDistribution

logger = logging.getLogger(__name__)

_RANGE_PATTERN = re.compile(r'^([0-9]+(?:\.[0-9]+)?)\s*-\s*([0-9]+(?:\.[0-9]+)?)(?:\s*[^0-9]*)?$')
_LEADING_INT_PATTERN = re.compile(r'^[+-]?[0-9]+')
_LINE_BREAK_PATTERN = re.compile(r'\r?\n')


class FormatError(ValueError):
    """구간 라벨이 ``<숫자>-<숫자>`` 형식이 아닐 때 발생합니다."""

    def __init__(self, label: str):
        super().__init__(f"범위 라벨의 형식이 올바르지 않습니다: {label}")
        self.label = label


def parse_range(label: str) -> BinRange:
    """
    구간 라벨을 수치 구간으로 변환합니다.

    Args:
        label (str): 구간 라벨 (예: "3.0-3.5", "0-1点")

    Returns:
        BinRange: 원본 라벨과 하한/상한

    Raises:
        FormatError: 라벨이 형식에 맞지 않거나 하한이 상한보다 클 때

    Examples:
        >>> parse_range("3.0-3.5")
        BinRange(label='3.0-3.5', min=3.0, max=3.5)
    """
    match = _RANGE_PATTERN.match(label)
    if not match:
        raise FormatError(label)
    low, high = float(match.group(1)), float(match.group(2))
    if low > high:
        raise FormatError(label)
    return BinRange(label=label, min=low, max=high)


def parse_count(cell: str) -> int:
    """
    인원수 셀을 정수로 변환합니다.

    앞부분의 정수만 읽으며, 비어 있거나 숫자로 시작하지 않으면 0 입니다.

    Examples:
        >>> parse_count("12")
        12
        >>> parse_count("")
        0
        >>> parse_count("abc")
        0
    """
    cell = cell.strip()
    match = _LEADING_INT_PATTERN.match(cell)
    return int(match.group(0)) if match else 0


def split_row_label(label: str, grade_suffix: str = GRADE_SUFFIX) -> Tuple[str, int]:
    """
    행 라벨을 학과명과 학년으로 분리합니다.

    Args:
        label (str): 행 라벨 (예: "情報工学 2回生")
        grade_suffix (str): 학년 뒤에 붙는 표기

    Returns:
        Tuple[str, int]: (학과명, 학년). 학년 표기가 없으면 학년은 0

    Examples:
        >>> split_row_label("情報工学 2回生")
        ('情報工学', 2)
        >>> split_row_label("全学")
        ('全学', 0)
    """
    suffix = re.escape(grade_suffix)
    match = re.search(rf'([0-9]+)\s*{suffix}$', label)
    if not match:
        return label, 0
    major = re.sub(rf'\s*[0-9]+\s*{suffix}$', '', label).strip()
    return major, int(match.group(1))


def _kana_fold(text: str) -> str:
    # 가타카나를 히라가나로 (ァ-ン -> ぁ-ん)
    return ''.join(chr(ord(c) - 0x60) if 'ァ' <= c <= 'ン' else c for c in text)


def _jis_weight(char: str) -> Tuple[int, ...]:
    # JIS X 0208 순서: 라틴 < 가나(오십음) < 제1수준 한자(읽기순) < 제2수준 한자
    try:
        return (0,) + tuple(char.encode('euc_jp'))
    except UnicodeEncodeError:
        return (1, ord(char))


def collation_key(major: str) -> tuple:
    """
    학과명 정렬 키 (일본어 사전순에 가까운 순서).

    전각/반각, 대소문자, 히라가나/가타카나 차이를 먼저 무시하고
    JIS X 0208 배열 순서로 비교합니다. 동순위는 정규화 문자열, 원문 순으로 가립니다.

    Examples:
        >>> sorted(["法学", "文学", "情報工学", "経済学"], key=collation_key)
        ['経済学', '情報工学', '文学', '法学']
    """
    folded = _kana_fold(unicodedata.normalize('NFKC', major).casefold())
    return tuple(_jis_weight(char) for char in folded), folded, major


def parse_distribution_csv(raw: str, grade_suffix: str = GRADE_SUFFIX) -> DistributionDataset:
    """
    도수분포 CSV 텍스트를 DistributionDataset 으로 파싱합니다.

    Args:
        raw (str): CSV 원문
        grade_suffix (str): 행 라벨의 학년 표기

    Returns:
        DistributionDataset: 구간과 (학과, 학년) 순으로 정렬된 행 목록.
            헤더만 있거나 빈 텍스트이면 빈 데이터셋

    Raises:
        FormatError: 헤더의 구간 라벨이 형식에 맞지 않을 때 (부분 결과 없음)
    """
    lines = [line.strip() for line in _LINE_BREAK_PATTERN.split(raw)]
    lines = [line for line in lines if line]

    if len(lines) <= 1:
        return DistributionDataset()

    header_cells = lines[0].split(',')
    bin_labels = [cell.strip() for cell in header_cells[1:]]
    bins = [parse_range(label) for label in bin_labels if label]

    segments: List[SegmentDistribution] = []
    for line in lines[1:]:
        cells = line.split(',')
        if len(cells) <= 1:
            logger.debug("쉼표가 없는 행을 건너뜁니다: %r", line)
            continue

        row_label = cells[0].strip()
        if not row_label:
            logger.debug("행 라벨이 비어 있는 행을 건너뜁니다: %r", line)
            continue

        major, grade = split_row_label(row_label, grade_suffix)

        # 짧은 행은 0 으로 채워 구간 수와 항상 맞춤
        counts = [
            parse_count(cells[index + 1]) if index + 1 < len(cells) else 0
            for index in range(len(bins))
        ]

        segments.append(SegmentDistribution(
            major=major,
            grade=grade,
            label=row_label,
            counts=tuple(counts),
            total=sum(counts),
        ))

    segments.sort(key=lambda segment: (collation_key(segment.major), segment.grade))

    logger.info("구간 %d개, 행 %d개를 파싱했습니다.", len(bins), len(segments))
    return DistributionDataset(bins=tuple(bins), segments=tuple(segments))


def load_dataset(option: DatasetOption) -> DistributionDataset:
    """
    번들 CSV 파일을 읽어 파싱합니다.

    Raises:
        FileNotFoundError: CSV 파일이 없을 때
        FormatError: 헤더가 올바르지 않을 때
    """
    logger.info("데이터셋 '%s' 로드: %s", option.key, option.path)
    raw = option.path.read_text(encoding=CSV_ENCODING)
    return parse_distribution_csv(raw)


def load_all_datasets(options=DATASET_OPTIONS) -> dict:
    """
    설정된 모든 데이터셋을 로드합니다.

    Returns:
        dict: {데이터셋 키: DistributionDataset}
    """
    return {option.key: load_dataset(option) for option in options}


def to_csv_text(dataset: DistributionDataset, row_label_header: str = '') -> str:
    """
    데이터셋을 파싱 가능한 CSV 텍스트로 직렬화합니다.

    Examples:
        >>> print(to_csv_text(parse_distribution_csv(",0-1,1-2\\nCS 1回生,1,2")))
        ,0-1,1-2
        CS 1回生,1,2
    """
    header = ','.join([row_label_header] + [b.label for b in dataset.bins])
    rows = [
        ','.join([segment.label] + [str(count) for count in segment.counts])
        for segment in dataset.segments
    ]
    return '\n'.join([header] + rows)


def dataset_to_frame(dataset: DistributionDataset) -> pd.DataFrame:
    """
    데이터셋을 DataFrame 으로 변환합니다.

    Returns:
        pd.DataFrame: index=행 라벨, columns=['major', 'grade', <구간 라벨...>, 'total']
    """
    bin_labels = [b.label for b in dataset.bins]
    records = []
    for segment in dataset.segments:
        record = {'major': segment.major, 'grade': segment.grade}
        record.update(zip(bin_labels, segment.counts))
        record['total'] = segment.total
        records.append(record)

    df = pd.DataFrame(records, columns=['major', 'grade'] + bin_labels + ['total'])
    df.index = pd.Index([segment.label for segment in dataset.segments], name='label')
    return df


def find_option_for_path(path: str) -> Optional[DatasetOption]:
    """파일명으로 설정된 데이터셋 옵션을 찾습니다."""
    for option in DATASET_OPTIONS:
        if option.filename == path or str(option.path) == path:
            return option
    return None
