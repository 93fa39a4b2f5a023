"""
State Machines

일일 현금 메모의 상태 관리.
메모는 수정 가능한 draft로 시작하고 posted가 되면 영구히 고정됨.
"""

import logging
from enum import Enum

from core.types import MemoStatus

logger = logging.getLogger(__name__)


class StateMachineError(Exception):
    """상태 전이 오류"""
    pass


class StateMachine:
    """State Machine 기본 클래스

    Args:
        initial_state: 초기 상태
        transitions: 허용된 전이 맵 {from_state: [to_states]}
        name: 상태 머신 이름 (로깅용)
    """

    def __init__(
        self,
        initial_state: str | Enum,
        transitions: dict[str, list[str]],
        name: str = "StateMachine",
    ):
        self._state = initial_state.value if isinstance(initial_state, Enum) else initial_state
        self._transitions = transitions
        self._name = name
        self._history: list[tuple[str, str]] = []

    @property
    def state(self) -> str:
        """현재 상태"""
        return self._state

    def can_transition(self, to_state: str | Enum) -> bool:
        """전이 가능 여부 확인

        Args:
            to_state: 목표 상태

        Returns:
            현재 상태에서 전이 가능하면 True
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state
        allowed = self._transitions.get(self._state, [])
        return target in allowed

    def transition(self, to_state: str | Enum) -> str:
        """상태 전이

        Args:
            to_state: 목표 상태

        Returns:
            새 상태

        Raises:
            StateMachineError: 허용되지 않은 전이
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state

        if not self.can_transition(target):
            allowed = self._transitions.get(self._state, [])
            raise StateMachineError(
                f"{self._name}: Cannot transition from {self._state} to {target}. "
                f"Allowed: {allowed}"
            )

        old_state = self._state
        self._state = target
        self._history.append((old_state, target))

        logger.debug(
            f"{self._name}: {old_state} → {target}",
        )

        return target

    @property
    def history(self) -> list[tuple[str, str]]:
        """전이 이력"""
        return self._history.copy()


class MemoStateMachine(StateMachine):
    """일일 현금 메모 상태 머신

    전이 규칙:
    - draft → posted: 마감 (종료 상태)

    posted에서 나가는 전이는 없음.
    """

    TRANSITIONS: dict[str, list[str]] = {
        "draft": ["posted"],
    }

    def __init__(self, initial_state: str | MemoStatus = MemoStatus.DRAFT):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name="MemoStateMachine",
        )

    @property
    def is_posted(self) -> bool:
        """종료 상태 도달 여부"""
        return self._state == MemoStatus.POSTED.value

    @property
    def can_edit_entries(self) -> bool:
        """항목 추가/수정/삭제 가능 여부"""
        return self._state == MemoStatus.DRAFT.value

    @property
    def can_edit_notes(self) -> bool:
        """메모(notes)는 마감 후에도 수정 가능"""
        return True

    def post(self) -> str:
        """draft → posted

        Raises:
            StateMachineError: 이미 마감됨
        """
        return self.transition(MemoStatus.POSTED)
