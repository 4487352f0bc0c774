#!/usr/bin/env python3
"""
BoostIQ Pro Startup Script
백엔드 서버를 시작하고, 실행 중인 서버의 상태를 간단히 확인하는 스크립트

Usage:
    python start.py              # 백엔드 실행 후 준비될 때까지 대기
    python start.py --status     # 실행 중인 서버의 디바이스 상태/분석 출력
    python start.py --optimize   # 실행 중인 서버에 AI 최적화 요청
"""

import os
import sys
import subprocess
import time
import argparse
from pathlib import Path
import requests


API_BASE_URL = os.getenv("BOOSTIQ_API_URL", "http://localhost:5000").rstrip("/")


# =============================================================================
# 환경 확인
# =============================================================================

def check_env_file():
    """환경 변수 파일 존재 확인 (없어도 기본값으로 실행 가능)"""
    env_path = Path(__file__).parent / ".env"
    if not env_path.exists():
        print("⚠️ .env 파일이 없습니다. GEMINI_API_KEY 없이 기본 최적화만 제공됩니다.")
        return False
    print("✅ .env 파일 확인됨")
    return True


# =============================================================================
# 프로세스 시작
# =============================================================================

def start_backend():
    """백엔드 서버 시작"""
    print("🔧 백엔드 서버 시작 중...")

    try:
        backend_script = Path(__file__).parent / "backend" / "main.py"

        process = subprocess.Popen([sys.executable, str(backend_script)])

        time.sleep(2)

        if process.poll() is None:
            print("✅ 백엔드 서버 프로세스 시작됨")
            return process
        else:
            print("❌ 백엔드 서버 시작 실패")
            return None

    except OSError as e:
        print(f"❌ 백엔드 시작 오류: {e}")
        return None


def wait_for_backend_server(max_wait=30):
    """백엔드 서버 준비 대기"""
    print("⏳ 백엔드 서버 응답 대기 중...")

    for _ in range(max_wait):
        try:
            response = requests.get(f"{API_BASE_URL}/api/health", timeout=2)
            if response.status_code == 200:
                print("✅ 백엔드 서버 준비 완료")
                return True
        except requests.exceptions.RequestException:
            pass
        time.sleep(1)

    print("❌ 백엔드 서버 응답 시간 초과")
    return False


# =============================================================================
# 상태 확인 / 최적화 요청
# =============================================================================

def print_status():
    """현재 디바이스 지표와 규칙 기반 분석 결과 출력"""
    try:
        stats = requests.get(f"{API_BASE_URL}/api/device-stats", timeout=5).json()
        analysis = requests.get(f"{API_BASE_URL}/api/system-analysis", timeout=5).json()
    except requests.exceptions.RequestException as e:
        print(f"❌ 서버에 연결할 수 없습니다: {e}")
        return False

    print("📊 디바이스 상태")
    print(f"   CPU {stats['cpuUsage']}% | RAM {stats['ramUsage']}% | "
          f"Battery {stats['batteryLevel']}% | Storage {stats['storageUsage']}%")
    print(f"   Network {stats['networkUsage']}% | Temperature {stats['temperature']}°C")
    print(f"🏁 종합 성능 점수: {analysis['performanceScore']}")
    for suggestion in analysis["suggestions"]:
        print(f"   - {suggestion['title']} (+{suggestion['impact']}%)")
    return True


def request_optimization():
    """AI 최적화 요청 후 결과 출력"""
    try:
        response = requests.post(f"{API_BASE_URL}/api/optimize", timeout=120)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        print(f"❌ 최적화 실패: {e}")
        return False

    optimization = response.json()
    print(f"✨ {optimization['type']}: 성능 {optimization['impact']}% 향상 예상 (priority={optimization['priority']})")
    print(f"   {optimization['description']}")
    for action in optimization["actions"]:
        print(f"   - {action}")
    return True


# =============================================================================
# 메인 함수
# =============================================================================

def main():
    """메인 함수"""
    parser = argparse.ArgumentParser(description="BoostIQ Pro")
    parser.add_argument(
        "--status",
        action="store_true",
        help="실행 중인 서버의 디바이스 상태 출력"
    )
    parser.add_argument(
        "--optimize",
        action="store_true",
        help="실행 중인 서버에 AI 최적화 요청"
    )
    args = parser.parse_args()

    if args.status or args.optimize:
        ok = True
        if args.status:
            ok = print_status() and ok
        if args.optimize:
            ok = request_optimization() and ok
        sys.exit(0 if ok else 1)

    print("⚡ BoostIQ Pro")
    print("=" * 60)

    os.chdir(Path(__file__).parent)
    check_env_file()

    backend_process = start_backend()
    if not backend_process:
        sys.exit(1)

    if not wait_for_backend_server():
        backend_process.terminate()
        sys.exit(1)

    print(f"🔗 API 문서: {API_BASE_URL}/docs")
    print("\n종료하려면 Ctrl+C를 누르세요...")

    try:
        while backend_process.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n🛑 종료 중...")
    finally:
        if backend_process.poll() is None:
            backend_process.terminate()
        print("✅ 시스템이 종료되었습니다.")


if __name__ == "__main__":
    main()
