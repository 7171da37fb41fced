import sys

from gpa_insights.config import DATASET_OPTIONS
from gpa_insights.data_loader import FormatError, dataset_to_frame, find_option_for_path, load_dataset
from gpa_insights.statistics import aggregate_segments, weighted_average

# 번들 CSV 구조 확인 (인자로 파일명을 주면 해당 데이터셋만)
options = [find_option_for_path(arg) for arg in sys.argv[1:]] or list(DATASET_OPTIONS)

for option in options:
    if option is None:
        continue
    print(f"\n{'='*60}")
    print(f"데이터셋: {option.label} ({option.path})")
    print('='*60)

    try:
        dataset = load_dataset(option)
    except (FormatError, FileNotFoundError) as e:
        print(f"오류: {e}")
        continue

    df = dataset_to_frame(dataset)
    print(f"크기: {df.shape}")
    print(df.to_string())

    overall = aggregate_segments(dataset.segments, len(dataset.bins))
    average = weighted_average(overall.counts, dataset.bins)
    print(f"\n전체 인원: {overall.total}명, 가중평균: {'-' if average is None else f'{average:.2f}'}")
