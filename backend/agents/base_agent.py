from abc import ABC, abstractmethod
from typing import Any, Dict


class BaseAgent(ABC):
    """
    모든 에이전트의 기본 클래스

    모든 에이전트는 async process(state: Dict) -> Dict 패턴을 구현해야 합니다.
    입력 state는 수정하지 않고, 결과를 추가한 새 딕셔너리를 반환합니다.

    반환 형식:
        {
            **state,
            "success": bool,           # 처리 성공 여부
            "agent_type": str,         # 에이전트 타입
            "metadata": Dict[str, Any] # 추가 메타데이터
        }
    """

    def __init__(self, agent_type: str, description: str):
        self.agent_type = agent_type
        self.description = description

    @abstractmethod
    async def process(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """상태를 받아서 처리하고 결과가 추가된 상태를 반환합니다."""

    def describe(self) -> Dict[str, str]:
        return {"agent_type": self.agent_type, "description": self.description}
