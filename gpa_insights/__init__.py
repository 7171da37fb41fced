"""
GPA 분포 분석 모듈 패키지

학과×학년별 GPA 도수분포표(CSV)를 파싱하고, 가중평균과 추정 순위를 계산하는
핵심 기능을 모듈화하여 제공합니다.

Modules:
    - config: 경로, 데이터셋 목록 등 정적 설정
    - models: 분포 데이터 구조 (BinRange, SegmentDistribution 등)
    - data_loader: 범위 라벨 및 CSV 파싱, 데이터셋 로딩
    - statistics: 집계, 가중평균, 순위/백분위 추정
    - query: 학과·학년 선택에 따른 조회
    - visualizations: Plotly 기반 시각화
"""

__version__ = "1.0.0"
__author__ = "GPA Insights"
