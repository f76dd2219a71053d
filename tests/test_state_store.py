"""세션 상태 저장소 테스트"""

import json
import shutil
import tempfile
import unittest
import sys
import os

# 상위 디렉토리의 모듈들을 import 하기 위해 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.models import InspectionDetails, SessionState
from core.timer import SessionTimer
from utils.exceptions import FileHandlingError
from utils.state_store import JsonStateStore


class TestJsonStateStore(unittest.TestCase):
    """JsonStateStore 테스트"""

    def setUp(self):
        """테스트 시작 전 설정"""
        self.temp_dir = tempfile.mkdtemp()
        self.state_path = os.path.join(self.temp_dir, "_current_inspection_state_TEST.json")
        self.timer = SessionTimer(elapsed_seconds=42)
        self.store = JsonStateStore(self.state_path, timer=self.timer)

    def tearDown(self):
        """테스트 종료 후 정리"""
        self.store.stop()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _state(self, checked=1):
        return SessionState(checked_quantity=checked, good_output=checked,
                            defects={"3": 1}, current_defect_count={"2": 2},
                            language="korean", view="grid", has_defect_selected=True,
                            inspection_details=InspectionDetails(inspector="Kim", style_no="ST-01"))

    def test_save_and_restore(self):
        """저장 후 복원"""
        self.store.save(self._state())
        self.store.flush()

        self.assertTrue(os.path.exists(self.state_path))
        restored = self.store.restore()
        self.assertEqual(restored, self._state())
        self.assertEqual(self.store.restore_elapsed_seconds(), 42)

    def test_file_layout(self):
        self.store.save(self._state())
        self.store.flush()
        with open(self.state_path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
        self.assertEqual(set(payload), {'session', 'elapsed_seconds', 'saved_at'})
        self.assertEqual(payload['session']['current_defect_count'], {"2": 2})
        self.assertEqual(payload['elapsed_seconds'], 42)

    def test_latest_snapshot_wins(self):
        """여러 번 저장하면 마지막 스냅샷이 남음"""
        for checked in range(1, 21):
            self.store.save(self._state(checked))
        self.store.flush()
        self.assertEqual(self.store.restore().checked_quantity, 20)

    def test_restore_missing_file(self):
        self.assertIsNone(self.store.restore())
        self.assertEqual(self.store.restore_elapsed_seconds(), 0)

    def test_restore_corrupt_file(self):
        """손상된 파일은 복원하지 않음"""
        with open(self.state_path, 'w', encoding='utf-8') as f:
            f.write("{ broken")
        self.assertIsNone(self.store.restore())
        with self.assertRaises(FileHandlingError):
            self.store.load_payload()

    def test_restore_wrong_format(self):
        with open(self.state_path, 'w', encoding='utf-8') as f:
            json.dump({'elapsed_seconds': 3}, f)
        self.assertIsNone(self.store.restore())

    def test_restore_parsed_but_invalid_session(self):
        """JSON 은 읽히지만 값 형식이 잘못된 파일도 복원하지 않음"""
        bad_sessions = [
            {'defects': [1, 2]},
            {'inspection_details': "oops"},
            {'checked_quantity': -2, 'good_output': -2,
             'defects': {"0": -5}, 'current_defect_count': {"1": -3}},
        ]
        for session in bad_sessions:
            with self.subTest(session=session):
                with open(self.state_path, 'w', encoding='utf-8') as f:
                    json.dump({'session': session, 'elapsed_seconds': 5}, f)
                self.assertIsNone(self.store.restore())

    def test_delete(self):
        self.store.save(self._state())
        self.store.delete()
        self.assertFalse(os.path.exists(self.state_path))
        self.assertIsNone(self.store.restore())

    def test_stop_ends_writer_thread(self):
        self.store.stop()
        self.assertFalse(self.store.writer_thread.is_alive())


if __name__ == '__main__':
    unittest.main()
