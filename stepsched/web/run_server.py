"""
웹 서버 실행 스크립트
백엔드 API 서버를 시작합니다.
"""

import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(prog='stepsched-web', description='스케줄러 시뮬레이터 API 서버')
    parser.add_argument('--host', default='0.0.0.0')
    parser.add_argument('--port', type=int, default=8000)
    parser.add_argument('--reload', action='store_true')
    args = parser.parse_args()

    print("=" * 60)
    print("  tick 단위 CPU 스케줄러 시뮬레이터 - 웹 서버")
    print("=" * 60)
    print(f"API 문서: http://localhost:{args.port}/docs")
    print("종료하려면 Ctrl+C를 누르세요.")
    print("-" * 60)

    uvicorn.run('stepsched.web.app:app', host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
