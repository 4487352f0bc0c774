"""Shared fixtures for the BoostIQ Pro backend tests."""

import os

# 설정 모듈이 import되기 전에 테스트 환경 고정 (네트워크/스케줄러 비활성화)
os.environ["GEMINI_API_KEY"] = ""
os.environ["ENABLE_STATS_SIMULATION"] = "false"

import pytest

from agents.optimization_agent import AdvisorUnavailableError, OptimizationAgent, ResponseInterpreter
from database.memory_storage import get_storage


class FakeAdvisor:
    """AdvisorClient 대역: 미리 정한 원문을 돌려주거나 실패를 흉내냅니다."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.requests = []

    @property
    def llm_available(self):
        return self.error is None

    async def analyze(self, system_state):
        self.requests.append(system_state)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def interpreter():
    return ResponseInterpreter()


@pytest.fixture
def storage():
    store = get_storage()
    store.reset()
    yield store
    store.reset()


@pytest.fixture
def make_agent():
    def _make(reply=None, error=None):
        advisor = FakeAdvisor(reply=reply, error=error)
        return OptimizationAgent(advisor=advisor), advisor
    return _make


@pytest.fixture
def unavailable_error():
    return AdvisorUnavailableError("LLM 서비스를 사용할 수 없습니다.")


@pytest.fixture
def candidate():
    """A well-formed advisor record; tests copy and tweak it."""
    def _candidate(**overrides):
        record = {
            "type": "Memory Optimization",
            "description": "Free RAM held by idle apps",
            "impact": 20,
            "priority": "medium",
            "actions": ["Close idle apps"],
            "requiresPermission": False,
            "isAutomated": True,
        }
        record.update(overrides)
        return record
    return _candidate
