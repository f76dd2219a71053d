"""검사 세션이 사용하는 외부 협력 객체의 인터페이스"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from core.models import LogEntry, SessionState


DefectIndex = Union[int, str]


class TimerSource(ABC):
    """경과 시간과 재생/일시정지 상태를 제공합니다."""

    @property
    @abstractmethod
    def elapsed_seconds(self) -> int:
        pass

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        pass


class DefectCatalog(ABC):
    """언어별 불량 명칭을 제공합니다."""

    @abstractmethod
    def lookup(self, language: str, index: DefectIndex) -> str:
        """불량 인덱스의 표시 이름을 반환합니다. 없으면 UnknownDefectError."""
        pass


class PersistenceSink(ABC):
    """세션 스냅샷을 저장하고 복원합니다."""

    @abstractmethod
    def save(self, snapshot: SessionState):
        pass

    @abstractmethod
    def restore(self) -> Optional[SessionState]:
        pass


class LogSink(ABC):
    """판정 기록을 순서대로 받습니다."""

    @abstractmethod
    def append(self, entry: LogEntry):
        pass
