"""
시각화 모듈: Gantt Chart, 알고리즘 비교 그래프, 통계 표
"""

import sys
import matplotlib.pyplot as plt
from typing import Dict, List, Optional, TextIO
from stepsched.core.simulation import GanttEntry

# 비교 그래프 패널: (통계 키, 제목, 색상, 값 형식)
COMPARISON_PANELS = [
    ('avg_waiting_time', 'Average Waiting Time', 'skyblue', '{:.2f}'),
    ('avg_turnaround_time', 'Average Turnaround Time', 'lightcoral', '{:.2f}'),
    ('cpu_utilization', 'Unit Utilization (%)', 'lightgreen', '{:.1f}%'),
    ('preemptions', 'Preemptions', 'plum', '{:.0f}'),
]


class Visualizer:
    """스케줄링 결과 시각화"""

    def __init__(self):
        # 프로세스별 색상 설정
        self.colors = plt.cm.Set3.colors

    def draw_gantt_chart(self, gantt_data: List[GanttEntry], algorithm_name: str,
                         save_path: str = None, show: bool = True):
        """
        Gantt Chart 그리기 (프로세스별 한 줄)

        Args:
            gantt_data: Gantt Chart 데이터
            algorithm_name: 알고리즘 이름
            save_path: 저장 경로 (None이면 저장 안 함)
            show: 화면에 표시할지 여부
        """
        if not gantt_data:
            print(f"{algorithm_name}에 대한 Gantt 차트 데이터가 없습니다", file=sys.stderr)
            return

        fig, ax = plt.subplots(figsize=(16, 6))

        unique_pids = sorted(set(entry.pid for entry in gantt_data))
        pid_to_y = {pid: idx for idx, pid in enumerate(unique_pids)}

        for entry in gantt_data:
            duration = entry.end_time - entry.start_time
            y_pos = pid_to_y[entry.pid]
            color = self.colors[entry.pid % len(self.colors)]

            ax.barh(y_pos, duration, left=entry.start_time, height=0.8,
                    color=color, edgecolor='black', linewidth=0.5)

            if duration > 1:
                ax.text(entry.start_time + duration / 2, y_pos, f'P{entry.pid}',
                        ha='center', va='center', fontsize=8, fontweight='bold')

        ax.set_yticks(range(len(unique_pids)))
        ax.set_yticklabels([f'P{pid}' for pid in unique_pids])
        ax.set_xlabel('Tick', fontsize=12)
        ax.set_ylabel('Process', fontsize=12)
        ax.set_title(f'Gantt Chart - {algorithm_name}', fontsize=14, fontweight='bold')
        ax.grid(axis='x', alpha=0.3)

        plt.tight_layout()
        self._finish(fig, save_path, show, "Gantt 차트")

    def compare_algorithms(self, results: List[Dict], save_path: str = None, show: bool = True):
        """
        여러 알고리즘의 성능 비교 그래프

        Args:
            results: 각 알고리즘의 결과 리스트
            save_path: 저장 경로
            show: 화면에 표시할지 여부
        """
        if not results:
            print("비교할 결과가 없습니다", file=sys.stderr)
            return

        algorithms = [r['algorithm'] for r in results]
        positions = range(len(algorithms))

        fig, axes = plt.subplots(2, 2, figsize=(16, 12))
        fig.suptitle('Scheduling Algorithms Performance Comparison',
                     fontsize=16, fontweight='bold')

        for ax, (key, title, color, value_format) in zip(axes.flat, COMPARISON_PANELS):
            values = [r['statistics'][key] for r in results]
            bars = ax.bar(positions, values, color=color, edgecolor='black')
            ax.set_xticks(positions)
            ax.set_xticklabels(algorithms, rotation=45, ha='right', fontsize=9)
            ax.set_ylabel(title, fontsize=11)
            ax.set_title(f'{title} Comparison', fontsize=12, fontweight='bold')
            ax.grid(axis='y', alpha=0.3)
            if key == 'cpu_utilization':
                ax.set_ylim(0, 100)

            # 값 표시
            for bar, value in zip(bars, values):
                ax.text(bar.get_x() + bar.get_width() / 2., bar.get_height(),
                        value_format.format(value), ha='center', va='bottom', fontsize=9)

        plt.tight_layout()
        self._finish(fig, save_path, show, "비교 차트")

    @staticmethod
    def _finish(fig, save_path: Optional[str], show: bool, label: str):
        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"{label}가 {save_path}에 저장되었습니다", file=sys.stderr)

        if show:
            plt.show()
        else:
            plt.close(fig)

    def print_statistics_table(self, results: List[Dict], file: Optional[TextIO] = None):
        """
        통계를 표 형식으로 출력

        Args:
            results: 각 알고리즘의 결과 리스트
            file: 출력 스트림 (기본 stdout)
        """
        print("\n" + "=" * 110, file=file)
        print("스케줄링 알고리즘 성능 비교", file=file)
        print("=" * 110, file=file)
        print(f"{'알고리즘':<30} {'평균 대기':>12} {'평균 반환':>12} {'평균 응답':>12} "
              f"{'유닛 이용률(%)':>15} {'선점':>8}", file=file)
        print("-" * 110, file=file)

        for result in results:
            stats = result['statistics']
            print(f"{result['algorithm']:<30} "
                  f"{stats['avg_waiting_time']:>12.2f} "
                  f"{stats['avg_turnaround_time']:>12.2f} "
                  f"{stats['avg_response_time']:>12.2f} "
                  f"{stats['cpu_utilization']:>15.2f} "
                  f"{stats['preemptions']:>8}", file=file)

        print("=" * 110 + "\n", file=file)

    def print_process_details(self, results: Dict, file: Optional[TextIO] = None):
        """
        개별 프로세스의 상세 정보 출력

        Args:
            results: 알고리즘 실행 결과
            file: 출력 스트림 (기본 stdout)
        """
        print(f"\n{'=' * 80}", file=file)
        print(f"프로세스 상세 - {results['algorithm']}", file=file)
        print(f"{'=' * 80}", file=file)
        print(f"{'PID':<6} {'도착':>6} {'우선순위':>8} {'실행':>6} {'시작':>6} {'종료':>6} "
              f"{'대기':>6} {'반환':>6} {'응답':>6}", file=file)
        print(f"{'-' * 80}", file=file)

        for process in results['processes']:
            print(f"{process.pid:<6} "
                  f"{process.arrival_time:>6} "
                  f"{process.priority:>8} "
                  f"{process.execution_time:>6} "
                  f"{process.start_time:>6} "
                  f"{process.finish_time:>6} "
                  f"{process.waiting_time:>6} "
                  f"{process.turnaround_time:>6} "
                  f"{process.response_time:>6}", file=file)

        print(f"{'=' * 80}\n", file=file)
