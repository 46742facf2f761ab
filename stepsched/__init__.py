"""
tick 단위 CPU 스케줄러 시뮬레이터
"""

__version__ = "1.0.0"
