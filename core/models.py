"""데이터 모델 정의 모듈"""

from dataclasses import dataclass, field, asdict
from typing import List, Dict, Optional, Any, Tuple


DEFAULT_LANGUAGE = "english"
DEFAULT_VIEW = "list"

LOG_TYPE_PASS = "pass"
LOG_TYPE_REJECT = "reject"
STATUS_LABELS = {LOG_TYPE_PASS: "Pass", LOG_TYPE_REJECT: "Reject"}


@dataclass
class Tally:
    """검사 수량 집계. checked_quantity == good_output + defect_pieces 를 항상 만족합니다."""
    checked_quantity: int = 0
    good_output: int = 0
    defect_pieces: int = 0


@dataclass(frozen=True)
class DefectDetail:
    """불량 판정 한 건에 포함된 불량 항목"""
    name: str
    count: int
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'count': self.count, 'timestamp': self.timestamp}


@dataclass(frozen=True)
class LogEntry:
    """양품/불량 판정 한 건의 감사 기록. 생성 이후 변경되지 않습니다."""
    type: str
    garment_no: int
    status: str
    timestamp: int
    defect_details: Tuple[DefectDetail, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'garment_no': self.garment_no,
            'status': self.status,
            'timestamp': self.timestamp,
            'defect_details': [d.to_dict() for d in self.defect_details],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        details = tuple(
            DefectDetail(name=d['name'], count=int(d['count']), timestamp=int(d['timestamp']))
            for d in data.get('defect_details', [])
        )
        return cls(
            type=data['type'],
            garment_no=int(data['garment_no']),
            status=data.get('status', STATUS_LABELS.get(data['type'], "")),
            timestamp=int(data['timestamp']),
            defect_details=details,
        )


@dataclass
class InspectionDetails:
    """검사 시작 전에 입력하는 작업 정보"""
    inspector: str = ""
    style_no: str = ""
    buyer: str = ""
    order_no: str = ""
    color: str = ""
    order_quantity: int = 0
    session_id: str = ""

    def is_complete(self) -> bool:
        return bool(self.inspector and self.style_no)


@dataclass
class SessionState:
    """검사 세션 스냅샷. 영속화 저장소와 주고받는 형태입니다."""
    checked_quantity: int = 0
    good_output: int = 0
    defect_pieces: int = 0
    defects: Dict[str, int] = field(default_factory=dict)
    current_defect_count: Dict[str, int] = field(default_factory=dict)
    language: str = DEFAULT_LANGUAGE
    view: str = DEFAULT_VIEW
    has_defect_selected: bool = False
    inspection_details: Optional[InspectionDetails] = None

    @property
    def tally(self) -> Tally:
        return Tally(self.checked_quantity, self.good_output, self.defect_pieces)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # JSON 키는 문자열이어야 하므로 인덱스를 문자열로 맞춥니다.
        data['defects'] = {str(k): v for k, v in self.defects.items()}
        data['current_defect_count'] = {str(k): v for k, v in self.current_defect_count.items()}
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SessionState":
        """저장된 딕셔너리에서 복원합니다. 누락된 항목은 기본값을 사용합니다."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"세션 상태 형식이 올바르지 않습니다: {type(data).__name__}")
        pending = _count_map(data, 'current_defect_count')
        details = data.get('inspection_details')
        if isinstance(details, dict):
            known = InspectionDetails.__dataclass_fields__
            details = InspectionDetails(**{k: v for k, v in details.items() if k in known})
        elif details is not None:
            raise ValueError(f"inspection_details 형식이 올바르지 않습니다: {details!r}")
        language = data.get('language') or DEFAULT_LANGUAGE
        view = data.get('view') or DEFAULT_VIEW
        if not isinstance(language, str) or not isinstance(view, str):
            raise ValueError("language/view 는 문자열이어야 합니다.")
        return cls(
            checked_quantity=_non_negative(data.get('checked_quantity', 0), 'checked_quantity'),
            good_output=_non_negative(data.get('good_output', 0), 'good_output'),
            defect_pieces=_non_negative(data.get('defect_pieces', 0), 'defect_pieces'),
            defects=_count_map(data, 'defects'),
            current_defect_count=pending,
            language=language,
            view=view,
            has_defect_selected=any(v > 0 for v in pending.values()),
            inspection_details=details,
        )


def _non_negative(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} 값이 올바르지 않습니다: {value!r}")
    number = int(value)
    if number < 0:
        raise ValueError(f"{name} 값은 0 이상이어야 합니다: {number}")
    return number


def _count_map(data: Dict[str, Any], key: str) -> Dict[str, int]:
    counts = data.get(key) or {}
    if not isinstance(counts, dict):
        raise ValueError(f"{key} 형식이 올바르지 않습니다: {counts!r}")
    return {str(k): _non_negative(v, f"{key}[{k}]") for k, v in counts.items()}
