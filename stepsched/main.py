#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
tick 단위 CPU 스케줄러 시뮬레이터 - 메인 실행 파일

stdin(또는 --input 파일)에서 도착 레코드를 읽고 tick마다 한 줄씩 stdout에 출력한다:
    t unit1 unit2 ... unitN     (유휴 유닛은 -1)

스케줄링 방법:
    0 FCFS, 1 SJF, 2 SRTF, 3 Round Robin,
    4 Priority (FCFS), 5 Priority (SRTF), 6 Priority (Non-preemptive)
"""

import argparse
import sys
from typing import Dict, Iterable, List, Optional

from stepsched.core.scheduler_base import ConfigurationError, SchedulingInvariantError
from stepsched.core.simulation import DEFAULT_UNIT_COUNT, ArrivalRecord, Simulator
from stepsched.schedulers import (ALGORITHMS, DEFAULT_SLICE_LENGTH, SimulationConfig,
                                  create_scheduler)
from stepsched.utils.input_parser import InputParser
from stepsched.utils.visualization import Visualizer


def run_single_algorithm(method: int, records: Iterable[ArrivalRecord],
                         unit_count: int = DEFAULT_UNIT_COUNT,
                         slice_length: int = DEFAULT_SLICE_LENGTH,
                         verbose: bool = False) -> Dict:
    """단일 알고리즘 실행"""
    config = SimulationConfig(method, unit_count, slice_length).validate()
    scheduler = create_scheduler(config.method, config.slice_length)
    simulator = Simulator(scheduler, config.unit_count, records)
    return simulator.run(verbose=verbose)


def run_all_algorithms(records: List[ArrivalRecord],
                       unit_count: int = DEFAULT_UNIT_COUNT,
                       slice_length: int = DEFAULT_SLICE_LENGTH) -> List[Dict]:
    """모든 알고리즘을 같은 입력으로 실행"""
    return [run_single_algorithm(method, records, unit_count, slice_length)
            for method in sorted(ALGORITHMS)]


def _int_arg(value: str) -> int:
    """0x, 0o 접두사를 허용하는 정수 인자"""
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"정수가 아닙니다: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='stepsched',
        description='tick 단위 CPU 스케줄링 시뮬레이터',
        epilog='methods: ' + ', '.join(f'{m}={cls.name}' for m, cls in sorted(ALGORITHMS.items()))
    )
    parser.add_argument('method', nargs='?', type=_int_arg,
                        help='스케줄링 방법 (0-6)')
    parser.add_argument('unit_count', nargs='?', type=_int_arg, default=DEFAULT_UNIT_COUNT,
                        help=f'실행 유닛(CPU) 수 (기본 {DEFAULT_UNIT_COUNT})')
    parser.add_argument('slice_length', nargs='?', type=_int_arg, default=DEFAULT_SLICE_LENGTH,
                        help=f'Round Robin 타임 슬라이스 (기본 {DEFAULT_SLICE_LENGTH})')
    parser.add_argument('-i', '--input', help='입력 파일 (기본 stdin)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='이벤트 로그를 stderr로 출력')
    parser.add_argument('--stats', action='store_true',
                        help='통계 및 프로세스 상세를 stderr로 출력')
    parser.add_argument('--gantt', metavar='PNG', help='Gantt 차트 저장 경로')
    parser.add_argument('--compare', metavar='PNG', nargs='?', const='',
                        help='모든 방법을 실행하여 통계 비교 (경로를 주면 비교 차트 저장)')
    parser.add_argument('--generate', metavar='N', type=_int_arg,
                        help='랜덤 워크로드 N개를 입력 형식으로 출력하고 종료')
    parser.add_argument('--seed', type=_int_arg, help='랜덤 시드')
    return parser


def compare(args, records: List[ArrivalRecord]) -> int:
    """--compare: 모든 알고리즘 실행 후 통계 표 출력"""
    results = run_all_algorithms(records, args.unit_count, args.slice_length)

    visualizer = Visualizer()
    visualizer.print_statistics_table(results)
    if args.compare:
        visualizer.compare_algorithms(results, save_path=args.compare, show=False)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """메인 함수"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.generate is not None:
        records = InputParser.generate_random_processes(num_processes=args.generate, seed=args.seed)
        sys.stdout.write(InputParser.format_records(records))
        return 0

    stream = open(args.input, 'r', encoding='utf-8') if args.input else sys.stdin
    try:
        if args.compare is not None:
            try:
                SimulationConfig(0, args.unit_count, args.slice_length).validate()
            except ConfigurationError as e:
                parser.error(str(e))
            return compare(args, list(InputParser.read_records(stream)))

        if args.method is None:
            parser.error("arg1 not given (schedule method)")

        try:
            config = SimulationConfig(args.method, args.unit_count, args.slice_length).validate()
        except ConfigurationError as e:
            parser.error(str(e))

        scheduler = create_scheduler(config.method, config.slice_length)
        simulator = Simulator(scheduler, config.unit_count, InputParser.read_records(stream))

        try:
            for tick in simulator.iter_ticks():
                print(tick.format(), flush=True)
        except SchedulingInvariantError as e:
            print(f"[오류] {e}", file=sys.stderr)
            return 1
    finally:
        if args.input:
            stream.close()

    results = simulator.get_results()

    if args.verbose:
        for log in results['event_log']:
            print(log, file=sys.stderr)

    if args.stats:
        visualizer = Visualizer()
        visualizer.print_statistics_table([results], file=sys.stderr)
        visualizer.print_process_details(results, file=sys.stderr)

    if args.gantt:
        Visualizer().draw_gantt_chart(results['gantt_chart'], results['algorithm'],
                                      save_path=args.gantt, show=False)

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n사용자에 의해 시뮬레이션이 중단되었습니다.", file=sys.stderr)
        sys.exit(130)
