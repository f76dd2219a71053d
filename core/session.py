"""검사 집계 상태 머신

양품(Pass)/불량(Reject) 판정이 집계와 감사 기록을 어떻게 바꾸는지,
타이머 재생 여부가 판정을 어떻게 막는지를 관리합니다.
"""

import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from core.interfaces import DefectCatalog, DefectIndex, LogSink, PersistenceSink
from core.models import (
    DefectDetail, LogEntry, SessionState, Tally,
    LOG_TYPE_PASS, LOG_TYPE_REJECT, STATUS_LABELS,
)
from utils.exceptions import SessionError, ValidationError


def _now_millis() -> int:
    return int(time.time() * 1000)


def format_elapsed(seconds: int) -> str:
    """경과 초를 'HH:MM:SS' 로 변환합니다. 시간 자리는 잘라내지 않습니다."""
    if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds < 0:
        raise ValidationError(f"경과 시간은 0 이상의 정수여야 합니다: {seconds!r}")
    hrs = seconds // 3600
    mins = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hrs:02d}:{mins:02d}:{secs:02d}"


class InspectionSession:
    """한 배치의 검사 세션 집계를 관리합니다.

    재생 여부(is_playing)와 언어는 호출하는 쪽(UI)이 소유하며 각 판정 호출에
    인자로 넘깁니다. 판정 조건이 맞지 않으면 아무 것도 바꾸지 않고 False 를
    반환합니다.
    """

    def __init__(self, catalog: DefectCatalog, state: Optional[SessionState] = None,
                 persistence: Optional[PersistenceSink] = None,
                 log_sink: Optional[LogSink] = None,
                 clock: Optional[Callable[[], int]] = None):
        state = state or SessionState()
        self.catalog = catalog
        self.persistence = persistence
        self.log_sink = log_sink
        self.clock = clock or _now_millis

        self._lock = threading.RLock()
        self._tally = Tally(state.checked_quantity, state.good_output, state.defect_pieces)
        self._defects: Dict[str, int] = dict(state.defects)
        self._current_defect_count: Dict[str, int] = dict(state.current_defect_count)
        self.language = state.language
        self.view = state.view
        self.inspection_details = state.inspection_details
        self.is_submitted = False

        counts = (self._tally.checked_quantity, self._tally.good_output, self._tally.defect_pieces,
                  *self._defects.values(), *self._current_defect_count.values())
        if any(count < 0 for count in counts):
            raise ValidationError(f"복원된 수량에 음수가 있습니다: {state}")
        if self._tally.checked_quantity != self._tally.good_output + self._tally.defect_pieces:
            raise ValidationError(
                f"복원된 집계가 맞지 않습니다: 검사 {self._tally.checked_quantity} != "
                f"양품 {self._tally.good_output} + 불량 {self._tally.defect_pieces}")

    @classmethod
    def restore(cls, state: Optional[SessionState], catalog: DefectCatalog, **kwargs) -> "InspectionSession":
        """저장된 스냅샷에서 세션을 만듭니다. 스냅샷이 없으면 기본값으로 시작합니다."""
        return cls(catalog, state=state, **kwargs)

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    @property
    def tally(self) -> Tally:
        with self._lock:
            return Tally(self._tally.checked_quantity, self._tally.good_output, self._tally.defect_pieces)

    @property
    def defects(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._defects)

    @property
    def current_defect_count(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._current_defect_count)

    @property
    def has_defect_selected(self) -> bool:
        with self._lock:
            return any(count > 0 for count in self._current_defect_count.values())

    def can_pass(self, is_playing: bool) -> bool:
        return bool(is_playing) and not self.has_defect_selected and not self.is_submitted

    def can_reject(self, is_playing: bool) -> bool:
        return bool(is_playing) and self.has_defect_selected and not self.is_submitted

    def serialize(self) -> SessionState:
        with self._lock:
            return SessionState(
                checked_quantity=self._tally.checked_quantity,
                good_output=self._tally.good_output,
                defect_pieces=self._tally.defect_pieces,
                defects=dict(self._defects),
                current_defect_count=dict(self._current_defect_count),
                language=self.language,
                view=self.view,
                has_defect_selected=any(c > 0 for c in self._current_defect_count.values()),
                inspection_details=self.inspection_details,
            )

    # ------------------------------------------------------------------
    # 동작
    # ------------------------------------------------------------------

    def select_defect(self, index: DefectIndex, count: int):
        """현재 검사 중인 제품의 불량 수량을 지정합니다. 일시정지 중에도 가능합니다."""
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValidationError(f"불량 수량은 정수여야 합니다: {count!r}")
        if count < 0:
            raise ValidationError(f"불량 수량은 0 이상이어야 합니다: {count}")

        with self._lock:
            self._ensure_open()
            self._current_defect_count[str(index)] = count
            self._emit_snapshot()

    def mark_pass(self, is_playing: bool) -> bool:
        with self._lock:
            self._ensure_open()
            if not self.can_pass(is_playing):
                return False

            timestamp = self.clock()
            self._tally = Tally(self._tally.checked_quantity + 1,
                                self._tally.good_output + 1,
                                self._tally.defect_pieces)
            entry = LogEntry(
                type=LOG_TYPE_PASS,
                garment_no=self._tally.checked_quantity,
                status=STATUS_LABELS[LOG_TYPE_PASS],
                timestamp=timestamp,
            )
            self._emit_entry(entry)
            self._emit_snapshot()
            return True

    def mark_reject(self, is_playing: bool, language: Optional[str] = None) -> bool:
        with self._lock:
            self._ensure_open()
            if not self.can_reject(is_playing):
                return False

            language = language or self.language
            pending = self._pending_defects()
            # 이름 해석이 실패하면 (UnknownDefectError) 상태를 바꾸기 전에 중단됩니다.
            names = [self.catalog.lookup(language, index) for index, _ in pending]

            timestamp = self.clock()
            defects = dict(self._defects)
            for index, count in pending:
                defects[index] = defects.get(index, 0) + count
            details = tuple(
                DefectDetail(name=name, count=count, timestamp=timestamp)
                for name, (_, count) in zip(names, pending)
            )

            self._tally = Tally(self._tally.checked_quantity + 1,
                                self._tally.good_output,
                                self._tally.defect_pieces + 1)
            self._defects = defects
            self._current_defect_count = {}

            entry = LogEntry(
                type=LOG_TYPE_REJECT,
                garment_no=self._tally.checked_quantity,
                status=STATUS_LABELS[LOG_TYPE_REJECT],
                timestamp=timestamp,
                defect_details=details,
            )
            self._emit_entry(entry)
            self._emit_snapshot()
            return True

    def set_language(self, language: str):
        with self._lock:
            self._ensure_open()
            self.language = language
            self._emit_snapshot()

    def set_view(self, view: str):
        with self._lock:
            self._ensure_open()
            self.view = view
            self._emit_snapshot()

    def submit(self, handoff: Optional[Callable[[SessionState], None]] = None) -> SessionState:
        """세션을 종료하고 최종 스냅샷을 넘깁니다. 이후의 모든 조작은 SessionError."""
        with self._lock:
            self._ensure_open()
            final_state = self.serialize()
            self.is_submitted = True
        if handoff:
            handoff(final_state)
        return final_state

    # ------------------------------------------------------------------

    def _pending_defects(self) -> List[Tuple[str, int]]:
        return [(index, count) for index, count in self._current_defect_count.items() if count > 0]

    def _ensure_open(self):
        if self.is_submitted:
            raise SessionError("이미 제출된 검사 세션입니다.")

    def _emit_entry(self, entry: LogEntry):
        if self.log_sink:
            self.log_sink.append(entry)

    def _emit_snapshot(self):
        if self.persistence:
            self.persistence.save(self.serialize())
