"""진행 중인 검사 세션 상태를 JSON 파일로 저장/복원하는 모듈"""

import datetime
import json
import os
import queue
import threading
from typing import Any, Dict, Optional

from core.interfaces import PersistenceSink, TimerSource
from core.models import SessionState
from utils.exceptions import FileHandlingError


class JsonStateStore(PersistenceSink):
    """세션 스냅샷을 백그라운드 스레드에서 파일로 기록합니다.

    저장 요청이 밀려 있으면 마지막 스냅샷만 기록합니다. 타이머가 주어지면
    저장 시점의 경과 시간도 함께 기록합니다.
    """

    def __init__(self, state_path: str, timer: Optional[TimerSource] = None):
        self.state_path = state_path
        self.timer = timer
        self.save_queue: queue.Queue = queue.Queue()
        self.writer_thread = threading.Thread(target=self._state_writer, daemon=True)
        self.writer_thread.start()

    def save(self, snapshot: SessionState):
        payload = {
            'session': snapshot.to_dict(),
            'elapsed_seconds': self.timer.elapsed_seconds if self.timer else 0,
            'saved_at': datetime.datetime.now().isoformat(),
        }
        self.save_queue.put(payload)

    def _state_writer(self):
        while True:
            payload = self.save_queue.get()
            processed = 1
            stopping = payload is None
            try:
                # 밀린 요청은 건너뛰고 가장 최근 스냅샷만 기록
                while not stopping:
                    try:
                        newer = self.save_queue.get_nowait()
                    except queue.Empty:
                        break
                    processed += 1
                    if newer is None:
                        stopping = True
                    else:
                        payload = newer
                if payload is not None:
                    self._write(payload)
            except (OSError, TypeError, ValueError) as e:
                print(f"현재 세션 상태 저장 실패: {e}")
            finally:
                for _ in range(processed):
                    self.save_queue.task_done()
            if stopping:
                return

    def _write(self, payload: Dict[str, Any]):
        directory = os.path.dirname(self.state_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        temp_path = f"{self.state_path}.tmp"
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        os.replace(temp_path, self.state_path)

    def load_payload(self) -> Optional[Dict[str, Any]]:
        """저장 파일 전체를 읽습니다. 파일이 없으면 None, 손상되었으면 FileHandlingError."""
        if not os.path.exists(self.state_path):
            return None
        try:
            with open(self.state_path, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FileHandlingError(f"이전 작업 상태 로드 실패: {e}") from e
        if not isinstance(payload, dict) or not isinstance(payload.get('session'), dict):
            raise FileHandlingError("이전 작업 상태 파일 형식이 올바르지 않습니다.")
        return payload

    def restore(self) -> Optional[SessionState]:
        """저장된 스냅샷을 복원합니다. 없거나 읽을 수 없으면 None."""
        try:
            payload = self.load_payload()
        except FileHandlingError as e:
            print(e)
            return None
        if payload is None:
            return None
        try:
            return SessionState.from_dict(payload['session'])
        except (TypeError, ValueError, AttributeError) as e:
            print(f"이전 작업 상태 복원 실패: {e}")
            return None

    def restore_elapsed_seconds(self) -> int:
        try:
            payload = self.load_payload()
        except FileHandlingError:
            return 0
        if not payload:
            return 0
        try:
            return max(0, int(payload.get('elapsed_seconds', 0)))
        except (TypeError, ValueError):
            return 0

    def delete(self):
        """저장 파일을 삭제합니다. 대기 중인 저장이 끝난 뒤 삭제합니다."""
        self.flush()
        if os.path.exists(self.state_path):
            try:
                os.remove(self.state_path)
            except OSError as e:
                print(f"임시 세션 파일 삭제 실패: {e}")

    def flush(self):
        self.save_queue.join()

    def stop(self):
        self.save_queue.put(None)
        if self.writer_thread.is_alive():
            self.writer_thread.join(timeout=1.0)
