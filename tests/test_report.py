"""검사 결과 요약 및 PDF 보고서 테스트"""

import re
import shutil
import tempfile
import unittest
import sys
import os

# 상위 디렉토리의 모듈들을 import 하기 위해 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.catalog import JsonDefectCatalog
from core.models import DefectDetail, InspectionDetails, LogEntry, SessionState
from core.report import ReportRenderer, build_summary
from PIL import Image, ImageDraw


CATALOG = JsonDefectCatalog({
    'english': ["Broken Stitch", "Skip Stitch", "Open Seam", "Stain"],
    'korean': ["땀 끊김", "땀 뜀", "솔기 터짐", "얼룩"],
})


class TestBuildSummary(unittest.TestCase):
    """요약 계산 테스트"""

    def test_empty_session(self):
        summary = build_summary(SessionState(), CATALOG)
        self.assertEqual(summary['checked_quantity'], 0)
        self.assertEqual(summary['total_defects'], 0)
        self.assertEqual(summary['defect_rate'], 0.0)
        self.assertEqual(summary['dhu'], 0.0)
        self.assertEqual(summary['defect_breakdown'], [])

    def test_rates(self):
        """불량률과 DHU"""
        state = SessionState(checked_quantity=8, good_output=5, defect_pieces=3,
                             defects={"2": 3, "0": 2})
        summary = build_summary(state, CATALOG)
        self.assertEqual(summary['total_defects'], 5)
        self.assertEqual(summary['defect_rate'], 37.5)
        self.assertEqual(summary['dhu'], 62.5)

    def test_breakdown_order(self):
        """수량 내림차순, 같으면 인덱스 순"""
        state = SessionState(checked_quantity=6, good_output=0, defect_pieces=6,
                             defects={"3": 2, "1": 4, "0": 2, "2": 0})
        breakdown = build_summary(state, CATALOG)['defect_breakdown']
        self.assertEqual([item['index'] for item in breakdown], ["1", "0", "3"])
        self.assertEqual([item['name'] for item in breakdown], ["Skip Stitch", "Broken Stitch", "Stain"])

    def test_breakdown_language(self):
        state = SessionState(checked_quantity=1, defect_pieces=1, defects={"3": 1}, language="korean")
        self.assertEqual(build_summary(state, CATALOG)['defect_breakdown'][0]['name'], "얼룩")
        self.assertEqual(build_summary(state, CATALOG, "english")['defect_breakdown'][0]['name'], "Stain")

    def test_unknown_index_keeps_count(self):
        state = SessionState(checked_quantity=1, defect_pieces=1, defects={"17": 1})
        breakdown = build_summary(state, CATALOG)['defect_breakdown']
        self.assertEqual(breakdown, [{'index': "17", 'name': "#17", 'count': 1}])


class TestReportRenderer(unittest.TestCase):
    """PDF 보고서 생성 테스트"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.details = InspectionDetails(inspector="Kim", style_no="ST-01", buyer="ACME",
                                         order_no="PO-77", color="Navy", order_quantity=500,
                                         session_id="INSP-20261019-090000")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _entries(self, count):
        entries = []
        for no in range(1, count + 1):
            if no % 4 == 0:
                entries.append(LogEntry(type="reject", garment_no=no, status="Reject", timestamp=1760860800000 + no,
                                        defect_details=(DefectDetail("Stain", 1, 1760860800000 + no),)))
            else:
                entries.append(LogEntry(type="pass", garment_no=no, status="Pass", timestamp=1760860800000 + no))
        return entries

    def _page_count(self, path):
        with open(path, 'rb') as f:
            return len(re.findall(rb"/Type\s*/Page\b", f.read()))

    def test_render_single_page(self):
        state = SessionState(checked_quantity=4, good_output=3, defect_pieces=1, defects={"3": 1})
        path = os.path.join(self.temp_dir, "report.pdf")
        result = ReportRenderer().render(build_summary(state, CATALOG), self.details,
                                         self._entries(4), path, elapsed="00:12:30")
        self.assertEqual(result, path)
        with open(path, 'rb') as f:
            self.assertTrue(f.read(5).startswith(b"%PDF"))
        self.assertEqual(self._page_count(path), 1)

    def test_render_long_log_spans_pages(self):
        """기록이 많으면 여러 페이지"""
        entries = self._entries(200)
        state = SessionState(checked_quantity=200, good_output=150, defect_pieces=50, defects={"3": 50})
        path = os.path.join(self.temp_dir, "daily", "long.pdf")
        ReportRenderer().render(build_summary(state, CATALOG), self.details, entries, path)
        self.assertTrue(os.path.exists(path))
        self.assertGreater(self._page_count(path), 1)

    def test_wrap_text_fits_width(self):
        """긴 판정 기록 줄은 페이지 폭 안으로 나뉨"""
        renderer = ReportRenderer()
        draw = ImageDraw.Draw(Image.new('RGB', (10, 10)))
        font = renderer.fonts['small']
        text = "#12    09:00:01  Reject  " + ", ".join(f"Defect{n} x{n}" for n in range(40)) + " " + "X" * 300
        max_width = 400

        lines = renderer._wrap_text(draw, text, font, max_width)
        self.assertGreater(len(lines), 1)
        for line in lines:
            self.assertLessEqual(draw.textlength(line, font=font), max_width)
        self.assertEqual("".join(lines).replace(" ", ""), text.replace(" ", ""))

    def test_wrap_text_short_line_unchanged(self):
        renderer = ReportRenderer()
        draw = ImageDraw.Draw(Image.new('RGB', (10, 10)))
        self.assertEqual(renderer._wrap_text(draw, "#1 Pass", renderer.fonts['small'], 400), ["#1 Pass"])
        self.assertEqual(renderer._wrap_text(draw, "", renderer.fonts['small'], 400), [""])

    def test_render_reject_with_many_defects(self):
        details = tuple(DefectDetail(f"Defect category {n}", n, 1760860800000) for n in range(1, 60))
        entries = [LogEntry(type="reject", garment_no=1, status="Reject", timestamp=1760860800000,
                            defect_details=details)]
        state = SessionState(checked_quantity=1, defect_pieces=1, defects={"0": 1})
        path = os.path.join(self.temp_dir, "wide.pdf")
        ReportRenderer().render(build_summary(state, CATALOG), self.details, entries, path)
        self.assertTrue(os.path.exists(path))

    def test_render_without_details(self):
        path = os.path.join(self.temp_dir, "blank.pdf")
        ReportRenderer({'font_path': None}).render(build_summary(SessionState(), CATALOG), None, [], path)
        self.assertTrue(os.path.exists(path))


if __name__ == '__main__':
    unittest.main()
