"""검사 프로그램 화면 동작 테스트 (Tk 창 없이)"""

import unittest
import tempfile
import shutil
import os
import sys
from unittest.mock import Mock, patch

# 상위 디렉토리의 모듈들을 import 하기 위해 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.catalog import JsonDefectCatalog
from core.models import InspectionDetails, SessionState
from ui.base_ui import UIUtils
from Garment_inspection import GarmentInspectionApp


class TestUIUtilsDialogs(unittest.TestCase):
    """대화상자는 UIUtils 를 거쳐 표시"""

    @patch('ui.base_ui.messagebox')
    def test_dialog_helpers(self, mock_messagebox):
        mock_messagebox.askyesno.return_value = True
        mock_messagebox.askokcancel.return_value = False

        UIUtils.show_error_message("오류", "메시지")
        UIUtils.show_warning_message("경고", "메시지")
        self.assertTrue(UIUtils.ask_yes_no("확인", "계속?"))
        self.assertFalse(UIUtils.ask_ok_cancel("종료", "종료?"))

        mock_messagebox.showerror.assert_called_once_with("오류", "메시지", parent=None)
        mock_messagebox.showwarning.assert_called_once_with("경고", "메시지", parent=None)
        mock_messagebox.askyesno.assert_called_once_with("확인", "계속?", parent=None)
        mock_messagebox.askokcancel.assert_called_once_with("종료", "종료?", parent=None)

    def test_app_uses_dialog_helpers(self):
        """메인 프로그램은 messagebox 를 직접 호출하지 않음"""
        base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        with open(os.path.join(base_dir, 'Garment_inspection.py'), 'r', encoding='utf-8') as f:
            source = f.read()
        self.assertNotIn("messagebox", source)


class TestResumeSession(unittest.TestCase):
    """이전 작업 복구 실패 처리"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.app = GarmentInspectionApp.__new__(GarmentInspectionApp)
        self.app.catalog = JsonDefectCatalog({'english': ["Broken Stitch", "Stain"]})
        self.app.state_store = Mock()
        self.app.state_store.restore_elapsed_seconds.return_value = 12
        self.app.save_folder = self.temp_dir
        self.app.logger = None
        self.app.session = None
        self.app.details = None

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    @patch('Garment_inspection.UIUtils')
    @patch('Garment_inspection.EventLogger')
    def test_failed_resume_releases_logger(self, mock_logger_cls, mock_ui):
        """집계가 맞지 않는 상태 복구 시 로거를 닫고 상태를 비움"""
        details = InspectionDetails(inspector="Kim", style_no="ST-01", session_id="INSP-20261019-090000")
        bad_state = SessionState(checked_quantity=3, good_output=1, defect_pieces=1,
                                 inspection_details=details)

        self.app._resume_session(bad_state)

        mock_logger_cls.return_value.stop_logger.assert_called_once()
        mock_logger_cls.return_value.restore_entries.assert_not_called()
        self.assertIsNone(self.app.logger)
        self.assertIsNone(self.app.details)
        self.assertIsNone(self.app.session)
        self.app.state_store.delete.assert_called_once()
        mock_ui.show_warning_message.assert_called_once()


if __name__ == '__main__':
    unittest.main()
