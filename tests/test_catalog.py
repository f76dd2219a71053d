"""불량 목록 로더 테스트"""

import json
import shutil
import tempfile
import unittest
import sys
import os

# 상위 디렉토리의 모듈들을 import 하기 위해 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.catalog import JsonDefectCatalog
from utils.exceptions import ConfigurationError, UnknownDefectError
from utils.file_handler import resource_path


class TestJsonDefectCatalog(unittest.TestCase):
    """JsonDefectCatalog 테스트"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.catalog = JsonDefectCatalog({
            'english': ["Broken Stitch", "Skip Stitch", "Open Seam"],
            'korean': ["땀 끊김", "땀 뜀", "솔기 터짐"],
        })

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_lookup_by_int_and_str_index(self):
        self.assertEqual(self.catalog.lookup('english', 0), "Broken Stitch")
        self.assertEqual(self.catalog.lookup('english', "2"), "Open Seam")
        self.assertEqual(self.catalog.lookup('korean', "1"), "땀 뜀")

    def test_lookup_unknown_index(self):
        """범위를 벗어나거나 숫자가 아닌 인덱스"""
        for index in ("3", -1, "abc", None):
            with self.subTest(index=index):
                with self.assertRaises(UnknownDefectError) as ctx:
                    self.catalog.lookup('english', index)
                self.assertEqual(ctx.exception.index, index)

    def test_lookup_unknown_language(self):
        with self.assertRaises(UnknownDefectError) as ctx:
            self.catalog.lookup('spanish', 0)
        self.assertEqual(ctx.exception.language, 'spanish')

    def test_languages_and_names(self):
        self.assertEqual(self.catalog.languages(), ['english', 'korean'])
        self.assertEqual(self.catalog.names(), ["Broken Stitch", "Skip Stitch", "Open Seam"])
        self.assertEqual(self.catalog.names('korean')[2], "솔기 터짐")
        with self.assertRaises(UnknownDefectError):
            self.catalog.names('spanish')

    def test_default_language_falls_back_to_first(self):
        catalog = JsonDefectCatalog({'korean': ["얼룩"]}, default_language='english')
        self.assertEqual(catalog.default_language, 'korean')

    def test_empty_catalog_rejected(self):
        with self.assertRaises(ConfigurationError):
            JsonDefectCatalog({})

    def test_from_file(self):
        path = self._write("defects.json", json.dumps({'english': ["Stain"], 'korean': ["얼룩"]}, ensure_ascii=False))
        catalog = JsonDefectCatalog.from_file(path, default_language='korean')
        self.assertEqual(catalog.default_language, 'korean')
        self.assertEqual(catalog.lookup('korean', 0), "얼룩")

    def test_from_file_errors(self):
        """파일 없음, 손상, 형식 오류"""
        with self.assertRaises(ConfigurationError):
            JsonDefectCatalog.from_file(os.path.join(self.temp_dir, "missing.json"))
        with self.assertRaises(ConfigurationError):
            JsonDefectCatalog.from_file(self._write("broken.json", "{ not json"))
        with self.assertRaises(ConfigurationError):
            JsonDefectCatalog.from_file(self._write("wrong.json", json.dumps({'english': "Stain"})))
        with self.assertRaises(ConfigurationError):
            JsonDefectCatalog.from_file(self._write("list.json", json.dumps(["Stain"])))

    def test_bundled_defect_list(self):
        """기본 제공 불량 목록은 언어별 항목 수가 같아야 함"""
        catalog = JsonDefectCatalog.from_file(resource_path(os.path.join('assets', 'defects.json')))
        self.assertIn('english', catalog.languages())
        self.assertIn('korean', catalog.languages())
        self.assertEqual(len(catalog.names('english')), len(catalog.names('korean')))
        self.assertGreater(len(catalog.names('english')), 0)


if __name__ == '__main__':
    unittest.main()
