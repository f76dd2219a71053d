"""언어별 불량 목록 로더"""

import json
import os
from typing import Dict, List, Optional

from core.interfaces import DefectCatalog, DefectIndex
from core.models import DEFAULT_LANGUAGE
from utils.exceptions import ConfigurationError, UnknownDefectError


class JsonDefectCatalog(DefectCatalog):
    """{언어: [불량명, ...]} 형태의 불량 목록. 인덱스는 목록 순서입니다."""

    def __init__(self, defects_by_language: Dict[str, List[str]], default_language: str = DEFAULT_LANGUAGE):
        if not defects_by_language:
            raise ConfigurationError("불량 목록이 비어 있습니다.")
        self._defects = {lang: list(names) for lang, names in defects_by_language.items()}
        if default_language not in self._defects:
            default_language = next(iter(self._defects))
        self.default_language = default_language

    @classmethod
    def from_file(cls, file_path: str, default_language: str = DEFAULT_LANGUAGE) -> "JsonDefectCatalog":
        """JSON 파일에서 불량 목록을 읽습니다."""
        if not os.path.exists(file_path):
            raise ConfigurationError(f"불량 목록 파일을 찾을 수 없습니다: {file_path}")
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"불량 목록 파일 로드 오류: {e}") from e

        if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
            raise ConfigurationError("불량 목록 형식이 올바르지 않습니다. {언어: [불량명, ...]} 형식이어야 합니다.")
        return cls(data, default_language=default_language)

    def languages(self) -> List[str]:
        return list(self._defects)

    def names(self, language: Optional[str] = None) -> List[str]:
        language = language or self.default_language
        if language not in self._defects:
            raise UnknownDefectError(language, None)
        return list(self._defects[language])

    def lookup(self, language: str, index: DefectIndex) -> str:
        names = self._defects.get(language)
        if names is None:
            raise UnknownDefectError(language, index)
        try:
            position = int(index)
        except (TypeError, ValueError):
            raise UnknownDefectError(language, index)
        if position < 0 or position >= len(names):
            raise UnknownDefectError(language, index)
        return names[position]
