"""커스텀 예외 클래스들"""


class InspectionError(Exception):
    """검사 시스템의 기본 예외 클래스"""
    pass


class ConfigurationError(InspectionError):
    """설정 및 불량 목록 파일 관련 오류"""
    pass


class FileHandlingError(InspectionError):
    """파일 처리 관련 오류"""
    pass


class SessionError(InspectionError):
    """세션 관리 관련 오류 (제출된 세션에 대한 조작 등)"""
    pass


class ValidationError(InspectionError):
    """데이터 검증 관련 오류"""
    pass


class UnknownDefectError(ValidationError):
    """현재 언어의 불량 목록에 없는 불량 인덱스"""

    def __init__(self, language, index):
        self.language = language
        self.index = index
        super().__init__(f"'{language}' 불량 목록에 인덱스 {index!r}가 없습니다.")
