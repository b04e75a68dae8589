"""도메인 예외

각 예외는 메시지와 무관하게 `code` 로 오류 종류를 구분한다.
"""


class DomainError(Exception):
    """도메인 레이어 기본 예외"""
    code = "DOMAIN_ERROR"


class InvalidPlanError(DomainError):
    code = "INVALID_PLAN"

    def __init__(self, plan=None):
        self.plan = plan
        super().__init__('유효하지 않은 요금제입니다. "week" 또는 "month" 이어야 합니다.')


class MissingCodeError(DomainError):
    code = "MISSING_CODE"

    def __init__(self):
        super().__init__("액세스 키가 필요합니다.")


class InvalidFormatError(DomainError):
    code = "INVALID_FORMAT"

    def __init__(self, key: str):
        self.key = key
        super().__init__("액세스 키 형식이 올바르지 않습니다.")


class KeyNotFoundError(DomainError):
    code = "NOT_FOUND"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"액세스 키를 찾을 수 없습니다: {key}")


class KeyAlreadyUsedError(DomainError):
    code = "ALREADY_USED"

    def __init__(self, key: str):
        self.key = key
        super().__init__("이미 사용된 액세스 키입니다.")


class KeyExpiredError(DomainError):
    code = "EXPIRED"

    def __init__(self, key: str):
        self.key = key
        super().__init__("만료된 액세스 키입니다.")


class HourMismatchError(DomainError):
    code = "HOUR_MISMATCH"

    def __init__(self, key: str, key_hour: int, current_hour: int):
        self.key = key
        self.key_hour = key_hour
        self.current_hour = current_hour
        super().__init__("다른 시간대에 발급된 액세스 키입니다. 새 키를 발급받아 주세요.")


class StoreUnavailableError(DomainError):
    code = "STORE_UNAVAILABLE"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"키 저장소를 사용할 수 없습니다 ({operation}). 잠시 후 다시 시도해주세요.")
