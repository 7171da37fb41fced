import streamlit as st

from gpa_insights.config import APP_NAME, DATASET_OPTIONS, GRADE_SUFFIX, get_dataset_option
from gpa_insights.data_loader import FormatError, load_dataset
from gpa_insights.query import (
    available_grades,
    list_majors,
    segment_display_label,
    summarize_selection,
)
from gpa_insights.statistics import clamp_value, display_rank, locate_bin, parse_value, value_bounds
from gpa_insights.visualizations import create_distribution_chart

st.set_page_config(page_title=APP_NAME, layout="wide")

# ═══════════════════════════════════════════════════════════════════
# Session State 초기화
# ═══════════════════════════════════════════════════════════════════

if 'app_config' not in st.session_state:
    st.session_state.app_config = {
        'selected': {
            'dataset_key': DATASET_OPTIONS[0].key,
            'major': '',
            'grade': None,
        },
    }


def get_config(path: str, default=None):
    """
    세션 설정에서 값을 안전하게 가져옵니다.

    사용 예시:
        get_config('selected.dataset_key')     → 'current'
    """
    value = st.session_state.app_config
    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def set_config(path: str, value):
    keys = path.split('.')
    config = st.session_state.app_config
    for key in keys[:-1]:
        config = config.setdefault(key, {})
    config[keys[-1]] = value


def format_decimal(value, fraction: int = 1) -> str:
    return "-" if value is None else f"{value:,.{fraction}f}"


def format_count(value: int) -> str:
    return f"{value:,}"


@st.cache_data
def cached_dataset(key: str):
    return load_dataset(get_dataset_option(key))


# ═══════════════════════════════════════════════════════════════════
# 데이터 로드
# ═══════════════════════════════════════════════════════════════════

st.title(APP_NAME)
st.caption("学校から提供された固定 CSV をもとに、学科×学年ごとの GPA 分布を可視化し、自分の位置づけを推定します。")

dataset_labels = {option.key: option.label for option in DATASET_OPTIONS}
dataset_key = st.radio(
    "データソース",
    options=list(dataset_labels),
    format_func=lambda key: dataset_labels[key],
    index=list(dataset_labels).index(get_config('selected.dataset_key', DATASET_OPTIONS[0].key)),
    horizontal=True,
)
set_config('selected.dataset_key', dataset_key)
active_option = get_dataset_option(dataset_key)

try:
    dataset = cached_dataset(dataset_key)
except FormatError as e:
    st.error(f"❌ CSV の構造が不正です ({active_option.filename}): {e}")
    st.stop()
except FileNotFoundError:
    st.error(f"❌ CSV ファイルが見つかりません: {active_option.path}")
    st.stop()

if dataset.is_empty:
    st.info("データがまだ登録されていません。")

bins = dataset.bins
segments = dataset.segments
value_min, value_max = value_bounds(bins)

# ═══════════════════════════════════════════════════════════════════
# 1. データセット概要
# ═══════════════════════════════════════════════════════════════════

overview = summarize_selection(dataset, '', None)
st.subheader("1. データセット概要")
m1, m2, m3 = st.columns(3)
m1.metric("登録セグメント", f"{format_count(len(segments))} 件")
m2.metric("総学生数", f"{format_count(overview.overall_aggregate.total)} 名")
m3.metric("GPA 範囲", f"{value_min:.2f} 〜 {value_max:.2f}")
st.caption(f"ファイル: data/{active_option.filename}")

# ═══════════════════════════════════════════════════════════════════
# 2. 入力
# ═══════════════════════════════════════════════════════════════════

st.subheader("2. 自分の情報を入力")
majors = list_majors(segments)
col_major, col_grade, col_value = st.columns(3)

with col_major:
    selected_major = get_config('selected.major', '')
    major_index = majors.index(selected_major) if selected_major in majors else 0
    major = st.selectbox("学科", majors, index=major_index) if majors else ''
    set_config('selected.major', major or '')

grades = available_grades(segments, major or '')
with col_grade:
    selected_grade = get_config('selected.grade')
    grade_index = grades.index(selected_grade) if selected_grade in grades else 0
    grade = st.selectbox(
        "学年",
        grades,
        index=grade_index,
        format_func=lambda g: f"{g}{GRADE_SUFFIX}",
        disabled=not grades,
    ) if grades else None
    set_config('selected.grade', grade)

with col_value:
    value_input = st.text_input("あなたの GPA", placeholder="例: 3.85")

st.caption(f"※ GPA は {value_min:.2f} 〜 {value_max:.2f} の範囲で近似計算します。")

numeric_value = parse_value(value_input)
has_value = numeric_value is not None

summary = summarize_selection(dataset, major or '', grade, numeric_value)
segment = summary.segment

# ═══════════════════════════════════════════════════════════════════
# 3. 推定結果
# ═══════════════════════════════════════════════════════════════════

st.subheader("3. 推定結果")
c1, c2, c3, c4 = st.columns(4)
target_total = segment.total if segment is not None else 0
c1.metric("対象人数", f"{format_count(target_total)} 名")
c2.metric("平均 GPA（学年）", format_decimal(summary.grade_average))
c3.metric("平均 GPA（学科）", format_decimal(summary.major_average))
c4.metric("平均 GPA（全体）", format_decimal(summary.overall_average))

rank, percentile = display_rank(summary.rank_info)
if segment is None or not has_value:
    st.info("学科・学年と GPA を入力すると順位を推定します")
elif rank is None:
    st.warning("対象人数が少ないため順位を推定できません")
else:
    st.success(
        f"{format_count(target_total)} 名中 推定 {format_count(rank)} 位"
        f"（{active_option.label} / 上位 {format_decimal(percentile)}%）"
    )
st.caption("※ ビンごとの人数から一様分布と仮定して近似しています。")

# ═══════════════════════════════════════════════════════════════════
# 4. 分布
# ═══════════════════════════════════════════════════════════════════

st.subheader("4. 分布を確認")
counts = segment.counts if segment is not None else summary.major_aggregate.counts
highlight = None
if segment is not None and has_value and bins:
    highlight = locate_bin(clamp_value(numeric_value, bins), bins)

fig = create_distribution_chart(
    bins,
    counts,
    title=segment_display_label(segment, major or ''),
    highlight_index=highlight,
)
if fig is None:
    st.info("学科・学年を選択すると分布グラフが表示されます。")
else:
    st.plotly_chart(fig, use_container_width=True)
