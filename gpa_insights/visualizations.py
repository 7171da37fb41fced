"""
시각화 모듈

Plotly 기반의 GPA 분포 차트 생성 기능을 제공합니다.
"""

from typing import Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from gpa_insights.models import BinRange

BAR_COLOR = 'rgba(99, 102, 241, 0.75)'


def distribution_frame(bins: Sequence[BinRange], counts: Sequence[int]) -> pd.DataFrame:
    """
    구간별 인원수를 차트용 DataFrame 으로 변환합니다.

    Returns:
        pd.DataFrame: columns=['구간', '인원수', '비율(%)']
    """
    df = pd.DataFrame({
        '구간': [b.label for b in bins],
        '인원수': list(counts[:len(bins)]) + [0] * max(0, len(bins) - len(counts)),
    })
    total = df['인원수'].sum()
    df['비율(%)'] = (df['인원수'] / total * 100).round(1) if total > 0 else 0.0
    return df


def create_distribution_chart(
    bins: Sequence[BinRange],
    counts: Sequence[int],
    title: str = "分布",
    highlight_index: Optional[int] = None
) -> Optional[go.Figure]:
    """
    구간별 인원수 막대 그래프를 생성합니다.

    Args:
        bins (Sequence[BinRange]): 구간 목록
        counts (Sequence[int]): 구간별 인원수
        title (str): 범례에 표시할 대상 이름 (예: "CS 1回生")
        highlight_index (Optional[int]): 강조할 구간 (입력한 값이 속한 구간)

    Returns:
        Optional[go.Figure]: Plotly Figure 객체. 인원이 모두 0 이면 None
    """
    if not bins or all(count == 0 for count in counts):
        return None

    df = distribution_frame(bins, counts)

    colors = [BAR_COLOR] * len(df)
    if highlight_index is not None and 0 <= highlight_index < len(colors):
        colors[highlight_index] = 'rgba(236, 72, 153, 0.85)'

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=df['구간'],
        y=df['인원수'],
        name=f"{title} の人数",
        marker=dict(color=colors),
        customdata=df['비율(%)'],
        hovertemplate="<b>%{x}</b><br>人数: %{y}名<br>比率: %{customdata:.1f}%<extra></extra>",
    ))

    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(240,242,246,0.3)",
        height=400,
        showlegend=True,
        xaxis_title="GPA レンジ",
        yaxis_title="人数",
        yaxis=dict(tickformat=',d', rangemode='tozero'),
        bargap=0.15,
        margin=dict(l=60, r=40, t=40, b=60),
        legend=dict(orientation="h", yanchor="top", y=-0.2, xanchor="center", x=0.5),
    )

    return fig
