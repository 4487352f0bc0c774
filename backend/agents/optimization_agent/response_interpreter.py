"""
ResponseInterpreter - 어드바이저 응답 해석기

외부 LLM 어드바이저가 돌려준 자유 형식 텍스트에서 최적화 추천 하나를 골라냅니다.

처리 단계:
1. 추출: 텍스트에서 첫 번째 JSON 배열/객체 구간을 찾음
2. 정규화: 줄바꿈 제거, 연속 공백을 하나로 축약
3. 구조 파싱: 직접 파싱 → 쉼표 복구 후 재시도 → 대괄호로 감싸 재시도
4. 검증: 스키마를 만족하지 않는 후보 제거
5. 랭킹: 우선순위 가중치 × 영향도 점수가 가장 높은 후보 선택 (동점은 입력 순서)

어느 단계에서 실패하든 기본 최적화(fallback)를 반환하며,
호출자에게 예외를 전파하지 않습니다. I/O나 공유 상태가 없으므로 동시 호출에 안전합니다.
"""

import json
import logging
import math
import random
import re
from typing import Any, List, Optional, Union

from pydantic import (
    BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr,
    ValidationError, field_validator
)

from database.models import InsertOptimization

logger = logging.getLogger(__name__)

NEWLINE_PATTERN = re.compile(r"(\r\n|\n|\r)")
WHITESPACE_PATTERN = re.compile(r"\s+")

# 복구 규칙 (적용 순서대로)
REPAIR_RULES = [
    (re.compile(r"}\s*{"), "},{"),  # 객체 사이 누락된 쉼표
    (re.compile(r",\s*]"), "]"),    # 배열 끝 쉼표
    (re.compile(r",\s*}"), "}"),    # 객체 끝 쉼표
]

PRIORITY_WEIGHTS = {"high": 3, "medium": 2, "low": 1}

FALLBACK_CATEGORY = "Basic System Optimization"
FALLBACK_DESCRIPTION = "General performance optimization based on system analysis"
FALLBACK_ACTIONS = ("Clear system cache", "Close inactive apps")
FALLBACK_IMPACT_RANGE = (10, 30)  # [10, 30)


# =============================================================================
# 오류 정의
# =============================================================================

class InterpretationError(Exception):
    """응답 해석 단계 실패의 기본 클래스"""


class ExtractionNotFound(InterpretationError):
    """텍스트에서 JSON 구간을 찾지 못함"""


class StructuralParseFailure(InterpretationError):
    """복구를 시도했지만 JSON 파싱에 실패함"""


class NoValidCandidates(InterpretationError):
    """파싱은 됐지만 유효한 후보가 하나도 없음"""


# =============================================================================
# 후보 모델
# =============================================================================

class RecommendationCandidate(BaseModel):
    """파싱 직후의 추천 후보 (한 번의 해석 호출 안에서만 존재)"""
    model_config = ConfigDict(strict=True, frozen=True, populate_by_name=True, extra="ignore")

    category: StrictStr = Field(alias="type", min_length=1)
    description: StrictStr = Field(min_length=1)
    impact_score: Union[StrictInt, StrictFloat] = Field(alias="impact")
    priority: Any = None
    actions: List[Any]
    requires_permission: StrictBool = Field(alias="requiresPermission")
    is_automated: StrictBool = Field(alias="isAutomated")

    @field_validator("impact_score")
    @classmethod
    def _check_finite(cls, value):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("impact must be a finite number")
        return value

    @property
    def score(self) -> float:
        return priority_weight(self.priority) * self.impact_score

    def to_recommendation(self) -> InsertOptimization:
        return InsertOptimization(
            category=self.category,
            description=self.description,
            impact_score=self.impact_score,
            priority=self.priority,
            actions=list(self.actions),
            requires_permission=self.requires_permission,
            is_automated=self.is_automated,
        )


def priority_weight(priority: Any) -> int:
    """high→3, medium→2, low→1, 그 외→0"""
    if not isinstance(priority, str):
        return 0
    return PRIORITY_WEIGHTS.get(priority, 0)


def build_fallback_recommendation() -> InsertOptimization:
    """해석 실패 시 사용하는 기본 최적화. impact만 매번 달라집니다."""
    return InsertOptimization(
        category=FALLBACK_CATEGORY,
        description=FALLBACK_DESCRIPTION,
        impact_score=random.randrange(*FALLBACK_IMPACT_RANGE),
        priority="medium",
        actions=list(FALLBACK_ACTIONS),
        requires_permission=False,
        is_automated=True,
    )


# =============================================================================
# 해석기
# =============================================================================

class ResponseInterpreter:
    """어드바이저 원문 → 최적화 추천 1건"""

    def interpret(self, raw_text: Optional[str]) -> InsertOptimization:
        """
        원문을 해석해 가장 점수가 높은 추천을 반환합니다.

        Args:
            raw_text: 어드바이저가 반환한 텍스트 (설명 문장 + JSON 혼합 가능)

        Returns:
            InsertOptimization: 선택된 추천, 실패 시 기본 최적화
        """
        logger.debug(f"어드바이저 원문: {raw_text!r}")
        try:
            candidates = self.parse_candidates(raw_text)
            best = self.select_best(candidates)
        except InterpretationError as e:
            logger.warning(f"어드바이저 응답 해석 실패 ({type(e).__name__}): {e} → 기본 최적화 사용")
            return build_fallback_recommendation()
        except Exception as e:
            logger.error(f"어드바이저 응답 해석 중 예상치 못한 오류: {e}", exc_info=True)
            return build_fallback_recommendation()

        logger.info(f"✅ 최적화 선택: {best.category} (priority={best.priority}, impact={best.impact_score})")
        return best.to_recommendation()

    def parse_candidates(self, raw_text: Optional[str]) -> List[RecommendationCandidate]:
        """1~4단계: 추출, 정규화, 파싱, 검증"""
        json_content = self.normalize(self.extract(raw_text))
        logger.debug(f"추출된 JSON: {json_content}")

        parsed = self.parse_structure(json_content)
        return self.validate(parsed)

    # -------------------------------------------------------------------------
    # 1단계: 추출
    # -------------------------------------------------------------------------

    @staticmethod
    def extract(raw_text: Optional[str]) -> str:
        """
        뒤에 짝이 되는 닫는 괄호가 있는 첫 '[' 또는 '{'부터
        마지막 ']' 또는 '}'까지 잘라냅니다. 한 번의 순회로 끝납니다.
        """
        text = raw_text or ""
        last_closers = {"[": text.rfind("]"), "{": text.rfind("}")}
        scan_end = max(last_closers.values())

        for position in range(scan_end):
            last_close = last_closers.get(text[position], -1)
            if position < last_close:
                return text[position:last_close + 1]

        raise ExtractionNotFound("No JSON content found in response")

    # -------------------------------------------------------------------------
    # 2단계: 정규화
    # -------------------------------------------------------------------------

    @staticmethod
    def normalize(json_content: str) -> str:
        json_content = NEWLINE_PATTERN.sub("", json_content)
        json_content = WHITESPACE_PATTERN.sub(" ", json_content)
        return json_content.strip()

    # -------------------------------------------------------------------------
    # 3단계: 구조 파싱 + 복구
    # -------------------------------------------------------------------------

    def parse_structure(self, json_content: str) -> List[Any]:
        try:
            return self._load_sequence(json_content)
        except ValueError as e:
            logger.debug(f"첫 파싱 실패, JSON 복구 시도: {e}")

        repaired = self.repair(json_content)
        try:
            return self._load_sequence(repaired)
        except ValueError as e:
            if repaired.startswith("["):
                raise StructuralParseFailure(f"Failed to parse repaired JSON: {e}") from e
            logger.debug(f"복구 후 파싱 실패, 대괄호로 감싸서 재시도: {e}")

        try:
            return self._load_sequence(f"[{repaired}]")
        except ValueError as e:
            raise StructuralParseFailure(f"Failed to parse wrapped JSON: {e}") from e

    @staticmethod
    def repair(json_content: str) -> str:
        for pattern, replacement in REPAIR_RULES:
            json_content = pattern.sub(replacement, json_content)
        return json_content

    @staticmethod
    def _load_sequence(json_content: str) -> List[Any]:
        """JSON 배열은 그대로, 단일 객체는 1개짜리 리스트로 반환"""
        parsed = json.loads(json_content)
        if isinstance(parsed, list):
            return parsed
        if isinstance(parsed, dict):
            return [parsed]
        raise ValueError(f"expected JSON array or object, got {type(parsed).__name__}")

    # -------------------------------------------------------------------------
    # 4단계: 검증
    # -------------------------------------------------------------------------

    @staticmethod
    def validate(parsed: List[Any]) -> List[RecommendationCandidate]:
        candidates = []
        for item in parsed:
            try:
                candidates.append(RecommendationCandidate.model_validate(item))
            except ValidationError as e:
                logger.debug(f"유효하지 않은 후보 제외: {item!r} ({e.error_count()}개 오류)")

        if not candidates:
            raise NoValidCandidates("No valid optimizations found in response")
        return candidates

    # -------------------------------------------------------------------------
    # 5단계: 랭킹
    # -------------------------------------------------------------------------

    @staticmethod
    def rank(candidates: List[RecommendationCandidate]) -> List[RecommendationCandidate]:
        """점수 내림차순 정렬. sorted는 안정 정렬이므로 동점은 입력 순서를 유지합니다."""
        return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)

    def select_best(self, candidates: List[RecommendationCandidate]) -> RecommendationCandidate:
        if not candidates:
            raise NoValidCandidates("No candidates to rank")
        return self.rank(candidates)[0]


_default_interpreter = ResponseInterpreter()


def interpret(raw_text: Optional[str]) -> InsertOptimization:
    """기본 해석기로 어드바이저 원문을 해석합니다."""
    return _default_interpreter.interpret(raw_text)
