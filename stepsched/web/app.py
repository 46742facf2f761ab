"""
tick 단위 CPU 스케줄러 시뮬레이터 - FastAPI 백엔드
"""

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
import asyncio
import json

from stepsched import __version__
from stepsched.core.scheduler_base import SchedulerError
from stepsched.core.simulation import ArrivalRecord, Simulator
from stepsched.schedulers import ALGORITHMS, SimulationConfig, create_scheduler

app = FastAPI(
    title="Tick-step CPU Scheduler Simulator",
    description="tick 단위 CPU 스케줄링 정책 시뮬레이터",
    version=__version__
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic 모델
class ProcessInput(BaseModel):
    pid: int = Field(ge=0)
    arrival_time: int = Field(ge=0)
    priority: int
    execution_time: int = Field(ge=1)


class SimulationRequest(BaseModel):
    processes: List[ProcessInput]
    methods: List[int] = [0]
    unit_count: int = 1
    slice_length: int = 1


class TickOutput(BaseModel):
    time: int
    units: List[int]


class GanttEntry(BaseModel):
    pid: int
    start_time: int
    end_time: int


class ProcessResult(BaseModel):
    pid: int
    arrival_time: int
    priority: int
    execution_time: int
    start_time: Optional[int]
    finish_time: Optional[int]
    waiting_time: int
    turnaround_time: int
    response_time: Optional[int]


class SimulationResult(BaseModel):
    method: int
    algorithm: str
    ticks: List[TickOutput]
    lines: List[str]
    gantt_chart: List[GanttEntry]
    processes: List[ProcessResult]
    statistics: Dict[str, float]
    event_log: List[str]


def create_records(process_inputs: List[ProcessInput]) -> List[ArrivalRecord]:
    """ProcessInput 목록을 도착 시간별 레코드로 변환 (같은 시간은 입력 순서 유지)"""
    arrivals: Dict[int, ArrivalRecord] = {}
    for p in process_inputs:
        record = arrivals.setdefault(p.arrival_time, ArrivalRecord(p.arrival_time))
        record.processes.append((p.pid, p.priority, p.execution_time))
    return [arrivals[time] for time in sorted(arrivals)]


def create_simulator(records: List[ArrivalRecord], method: int,
                     unit_count: int = 1, slice_length: int = 1) -> Simulator:
    """설정 검증 후 시뮬레이터 생성"""
    config = SimulationConfig(method, unit_count, slice_length).validate()
    scheduler = create_scheduler(config.method, config.slice_length)
    return Simulator(scheduler, config.unit_count, records)


def run_scheduler(records: List[ArrivalRecord], method: int,
                  unit_count: int = 1, slice_length: int = 1) -> Dict:
    """스케줄러 실행 및 결과 반환"""
    result = create_simulator(records, method, unit_count, slice_length).run()

    return {
        'method': method,
        'algorithm': result['algorithm'],
        'ticks': [{'time': t.time, 'units': list(t.units)} for t in result['ticks']],
        'lines': [t.format() for t in result['ticks']],
        'gantt_chart': [
            {'pid': e.pid, 'start_time': e.start_time, 'end_time': e.end_time}
            for e in result['gantt_chart']
        ],
        'processes': [
            {
                'pid': p.pid,
                'arrival_time': p.arrival_time,
                'priority': p.priority,
                'execution_time': p.execution_time,
                'start_time': p.start_time,
                'finish_time': p.finish_time,
                'waiting_time': p.waiting_time,
                'turnaround_time': p.turnaround_time,
                'response_time': p.response_time
            }
            for p in result['processes']
        ],
        'statistics': result['statistics'],
        'event_log': result['event_log']
    }


@app.get("/")
async def root():
    return {"message": "Tick-step CPU Scheduler Simulator API", "version": __version__}


@app.get("/algorithms")
async def get_algorithms():
    """사용 가능한 알고리즘 목록 반환"""
    return {
        "algorithms": [
            {"id": method, "name": cls.name, "preemptive": cls.preemptive}
            for method, cls in sorted(ALGORITHMS.items())
        ]
    }


@app.post("/simulate")
async def simulate(request: SimulationRequest):
    """스케줄링 시뮬레이션 실행"""
    records = create_records(request.processes)
    try:
        results = [
            SimulationResult(**run_scheduler(records, method, request.unit_count,
                                             request.slice_length))
            for method in request.methods
        ]
    except SchedulerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "results": results}


@app.post("/simulate/compare")
async def compare_algorithms(request: SimulationRequest):
    """여러 알고리즘 비교 시뮬레이션"""
    records = create_records(request.processes)
    results = []
    comparison: Dict[str, List[Any]] = {
        'methods': [],
        'algorithms': [],
        'avg_waiting_time': [],
        'avg_turnaround_time': [],
        'avg_response_time': [],
        'cpu_utilization': [],
        'preemptions': []
    }

    try:
        for method in request.methods:
            result = run_scheduler(records, method, request.unit_count, request.slice_length)
            results.append(result)

            # 비교 데이터 수집
            stats = result['statistics']
            comparison['methods'].append(method)
            comparison['algorithms'].append(result['algorithm'])
            for key in ('avg_waiting_time', 'avg_turnaround_time', 'avg_response_time',
                        'cpu_utilization', 'preemptions'):
                comparison[key].append(stats.get(key, 0))
    except SchedulerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "results": results, "comparison": comparison}


class RealtimeSimulator:
    """WebSocket으로 한 tick씩 진행하는 시뮬레이터"""

    def __init__(self, records: List[ArrivalRecord], method: int,
                 unit_count: int = 1, slice_length: int = 1):
        self.method = method
        self.simulator = create_simulator(records, method, unit_count, slice_length)
        self.is_complete = False
        self.last_log_index = 0

    def step(self) -> Dict:
        """한 tick 실행 및 상태 반환"""
        if self.is_complete:
            return {'complete': True}

        is_complete = self.simulator.execute_one_step()
        snapshot = self.simulator.get_current_snapshot()
        tick = snapshot['latest_tick']

        # 새로운 로그
        event_log = self.simulator.context.event_log
        new_logs = event_log[self.last_log_index:]
        self.last_log_index = len(event_log)

        stats = {
            'current_time': snapshot['time'],
            'completed': len(snapshot['terminated']),
            'admitted': len(self.simulator.processes),
        }

        if is_complete:
            self.is_complete = True
            stats['final'] = self.simulator.get_results()['statistics']

        return {
            'complete': is_complete,
            'tick': {'time': tick.time, 'units': list(tick.units)} if tick else None,
            'line': tick.format() if tick else "",
            'ready_queue': [
                {'pid': p.pid, 'priority': p.priority, 'remaining': p.remaining_time}
                for p in snapshot['ready_queue']
            ],
            'new_logs': new_logs,
            'stats': stats
        }


@app.websocket("/ws/realtime")
async def websocket_realtime(websocket: WebSocket):
    """실시간 시뮬레이션 WebSocket 엔드포인트"""
    await websocket.accept()
    simulator = None

    try:
        while True:
            message = json.loads(await websocket.receive_text())
            action = message.get('action')

            if action == 'init':
                try:
                    processes = [ProcessInput(**p) for p in message['processes']]
                    simulator = RealtimeSimulator(
                        create_records(processes),
                        message.get('method', 0),
                        message.get('unit_count', 1),
                        message.get('slice_length', 1)
                    )
                except (SchedulerError, ValueError, KeyError) as e:
                    await websocket.send_json({'type': 'error', 'message': str(e)})
                    continue

                await websocket.send_json({
                    'type': 'initialized',
                    'method': simulator.method,
                    'algorithm': simulator.simulator.name,
                    'process_count': len(processes)
                })

            elif action == 'step':
                if simulator:
                    await websocket.send_json({'type': 'step_result', **simulator.step()})

            elif action == 'run':
                # 자동 실행 (속도 조절 가능)
                if simulator:
                    try:
                        speed = float(message.get('speed', 1.0))
                    except (TypeError, ValueError):
                        speed = 0.0
                    if speed <= 0:
                        await websocket.send_json({
                            'type': 'error',
                            'message': f"speed must be positive: {message.get('speed')!r}"
                        })
                        continue
                    delay = 1.0 / speed

                    while not simulator.is_complete:
                        result = simulator.step()
                        await websocket.send_json({'type': 'step_result', **result})
                        if result['complete']:
                            break
                        await asyncio.sleep(delay)

    except WebSocketDisconnect:
        pass


@app.get("/sample-processes")
async def get_sample_processes():
    """샘플 프로세스 데이터 반환"""
    return {
        "samples": [
            {
                "name": "단일 프로세스 (2 유닛)",
                "unit_count": 2,
                "processes": [
                    {"pid": 1, "arrival_time": 0, "priority": 2, "execution_time": 5}
                ]
            },
            {
                "name": "SRTF 선점",
                "unit_count": 1,
                "processes": [
                    {"pid": 1, "arrival_time": 0, "priority": 1, "execution_time": 3},
                    {"pid": 2, "arrival_time": 1, "priority": 1, "execution_time": 1}
                ]
            },
            {
                "name": "우선순위 혼합",
                "unit_count": 2,
                "processes": [
                    {"pid": 1, "arrival_time": 0, "priority": 3, "execution_time": 6},
                    {"pid": 2, "arrival_time": 0, "priority": 1, "execution_time": 4},
                    {"pid": 3, "arrival_time": 2, "priority": 0, "execution_time": 2},
                    {"pid": 4, "arrival_time": 3, "priority": 1, "execution_time": 5}
                ]
            }
        ]
    }
