"""검사 세션 타이머"""

from core.interfaces import TimerSource
from utils.exceptions import ValidationError


class SessionTimer(TimerSource):
    """재생/일시정지 가능한 스톱워치. 시계는 UI 가 1초마다 tick() 으로 진행시킵니다."""

    def __init__(self, elapsed_seconds: int = 0, is_playing: bool = False):
        if elapsed_seconds < 0:
            raise ValidationError(f"경과 시간은 0 이상이어야 합니다: {elapsed_seconds}")
        self._elapsed_seconds = int(elapsed_seconds)
        self._is_playing = is_playing

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_seconds

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    def play(self):
        self._is_playing = True

    def pause(self):
        self._is_playing = False

    def toggle(self) -> bool:
        """재생 상태를 뒤집고 새 상태를 반환합니다."""
        self._is_playing = not self._is_playing
        return self._is_playing

    def tick(self, seconds: int = 1) -> int:
        if self._is_playing:
            self._elapsed_seconds += seconds
        return self._elapsed_seconds

    def reset(self):
        self._elapsed_seconds = 0
        self._is_playing = False
