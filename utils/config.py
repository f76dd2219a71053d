"""설정 관리 모듈"""

import json
import os
from typing import Any, Dict, Optional


class ConfigManager:
    """애플리케이션 설정을 관리하는 클래스"""

    def __init__(self, config_file: str = "config.json", base_dir: Optional[str] = None):
        self.config_file = config_file
        # 기본 위치는 프로젝트 루트 (utils/ 의 상위 디렉토리)
        self.base_dir = base_dir or os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.config = self._load_config()

    @property
    def config_path(self) -> str:
        return os.path.join(self.base_dir, self.config_file)

    def _load_config(self) -> Dict[str, Any]:
        """설정 파일을 로드합니다."""
        try:
            if os.path.exists(self.config_path):
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            else:
                # 기본 설정 생성
                return self._create_default_config()
        except (OSError, json.JSONDecodeError) as e:
            print(f"설정 파일 로드 오류: {e}")
            return self._create_default_config()

    def _create_default_config(self) -> Dict[str, Any]:
        """기본 설정을 생성합니다."""
        default_config = {
            "app": {
                "name": "Garment Inspection",
                "version": "v1.0.0",
                "description": "봉제 완제품 품질 검사 시스템"
            },
            "inspection": {
                "default_language": "english",
                "default_view": "list",
                "defects_file": "assets/defects.json",
                "max_defect_count": 99,
                "sound_enabled": True,
                "pass_key": "F11",
                "reject_key": "F12"
            },
            "ui": {
                "window_title": "봉제 품질 검사",
                "window_geometry": "1400x800",
                "grid_columns": 4
            },
            "logging": {
                "data_folder": "",
                "audit_log_prefix": "inspection_audit",
                "event_log_prefix": "inspection_events"
            },
            "report": {
                "font_path": "C:/Windows/Fonts/malgun.ttf",
                "bold_font_path": "C:/Windows/Fonts/malgunbd.ttf",
                "page_size": [1240, 1754]
            }
        }
        self.save_config(default_config)
        return default_config

    def get(self, key_path: str, default=None):
        """점 표기법으로 설정값을 가져옵니다. 예: 'app.version'"""
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key_path: str, value):
        """점 표기법으로 설정값을 설정합니다."""
        keys = key_path.split('.')
        config = self.config

        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

    def save_config(self, config_data=None):
        """설정을 파일로 저장합니다."""
        try:
            data = config_data if config_data is not None else self.config
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=4)
        except OSError as e:
            print(f"설정 파일 저장 오류: {e}")
