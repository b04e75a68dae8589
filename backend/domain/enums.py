"""도메인 열거형"""
import enum


class Plan(str, enum.Enum):
    WEEK = "week"
    MONTH = "month"

    @property
    def code(self) -> str:
        """액세스 코드 3번째 자리에 들어가는 플랜 문자"""
        return PLAN_CODES[self]

    @property
    def duration_days(self) -> int:
        """발급 시각부터 만료까지 일수"""
        return PLAN_DURATIONS[self]


PLAN_CODES = {
    Plan.WEEK: "W",
    Plan.MONTH: "M",
}

PLAN_DURATIONS = {
    Plan.WEEK: 7,
    Plan.MONTH: 30,
}
