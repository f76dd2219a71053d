"""로깅 유틸리티 모듈

판정 감사 기록(audit)과 프로그램 이벤트(event)를 각각의 CSV 파일에
백그라운드 스레드로 기록합니다.
"""

import csv
import datetime
import json
import os
import queue
import threading
from typing import Dict, Any, Optional, List

from core.interfaces import LogSink
from core.models import LogEntry

AUDIT_FIELDNAMES = ['timestamp', 'session_id', 'garment_no', 'type', 'status', 'defect_details']
EVENT_FIELDNAMES = ['timestamp', 'worker', 'event', 'details']


class EventLogger(LogSink):
    """이벤트 및 판정 기록을 담당하는 클래스"""

    def __init__(self, event_log_path: str, audit_log_path: str,
                 worker_name: str = "", session_id: str = ""):
        self.event_log_path = event_log_path
        self.audit_log_path = audit_log_path
        self.worker_name = worker_name
        self.session_id = session_id
        self.entries: List[LogEntry] = []
        self._entries_lock = threading.Lock()
        self.log_queue: queue.Queue = queue.Queue()
        self.log_writer_running = True
        self._start_log_writer_thread()

    def _start_log_writer_thread(self):
        """로그 작성 스레드를 시작합니다."""
        self.log_thread = threading.Thread(target=self._event_log_writer, daemon=True)
        self.log_thread.start()

    def _event_log_writer(self):
        """로그를 파일에 작성하는 스레드 함수"""
        while self.log_writer_running:
            try:
                log_type, log_entry = self.log_queue.get(timeout=1)
            except queue.Empty:
                continue

            try:
                if log_entry is None:
                    break
                if log_type == 'audit':
                    self._write_row(self.audit_log_path, AUDIT_FIELDNAMES, log_entry)
                else:
                    self._write_row(self.event_log_path, EVENT_FIELDNAMES, log_entry)
            except (OSError, csv.Error) as e:
                print(f"로그 작성 오류: {e}")
            finally:
                self.log_queue.task_done()

    @staticmethod
    def _write_row(file_path: str, fieldnames: List[str], row: Dict[str, Any]):
        file_exists = os.path.exists(file_path) and os.stat(file_path).st_size > 0
        with open(file_path, mode='a', newline='', encoding='utf-8-sig') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            if not file_exists:
                writer.writeheader()
            writer.writerow(row)
            csvfile.flush()

    def append(self, entry: LogEntry):
        """판정 기록을 추가합니다. 호출 순서대로 파일에 기록됩니다."""
        with self._entries_lock:
            self.entries.append(entry)
            row = {
                'timestamp': entry.timestamp,
                'session_id': self.session_id,
                'garment_no': entry.garment_no,
                'type': entry.type,
                'status': entry.status,
                'defect_details': json.dumps([d.to_dict() for d in entry.defect_details], ensure_ascii=False),
            }
            self.log_queue.put(('audit', row))

    def log_event(self, event_type: str, detail: Optional[Dict] = None):
        """이벤트를 로그에 기록합니다."""
        log_entry = {
            'timestamp': datetime.datetime.now().isoformat(),
            'worker': self.worker_name or "System",
            'event': event_type,
            'details': json.dumps(detail, ensure_ascii=False) if detail else ""
        }
        self.log_queue.put(('event', log_entry))

    def get_entries(self) -> List[LogEntry]:
        with self._entries_lock:
            return list(self.entries)

    def load_entries(self, session_id: Optional[str] = None) -> List[LogEntry]:
        """감사 로그 파일에서 특정 세션의 판정 기록을 읽어옵니다."""
        session_id = self.session_id if session_id is None else session_id
        entries: List[LogEntry] = []
        if not os.path.exists(self.audit_log_path):
            return entries

        try:
            with open(self.audit_log_path, mode='r', encoding='utf-8-sig') as csvfile:
                for row in csv.DictReader(csvfile):
                    if row.get('session_id') != session_id:
                        continue
                    try:
                        details = json.loads(row['defect_details']) if row.get('defect_details') else []
                        entries.append(LogEntry.from_dict({
                            'type': row['type'],
                            'garment_no': row['garment_no'],
                            'status': row.get('status'),
                            'timestamp': row['timestamp'],
                            'defect_details': details,
                        }))
                    except (json.JSONDecodeError, KeyError, ValueError):
                        continue
        except OSError as e:
            print(f"로그 파일 읽기 오류: {e}")
        return entries

    def restore_entries(self, session_id: Optional[str] = None) -> List[LogEntry]:
        """이전에 기록된 판정을 메모리 목록으로 복원합니다. (파일에는 다시 쓰지 않음)"""
        loaded = self.load_entries(session_id)
        with self._entries_lock:
            self.entries = loaded + self.entries
        return loaded

    def flush(self):
        """대기 중인 로그가 모두 기록될 때까지 기다립니다."""
        self.log_queue.join()

    def stop_logger(self):
        """로깅을 중지합니다."""
        self.log_queue.put((None, None))  # 종료 신호
        if self.log_thread.is_alive():
            self.log_thread.join(timeout=1.0)
        self.log_writer_running = False
