"""액세스 코드 생성 및 형식 규칙

코드 형식 (6자리):
  [0-1] 발급 시각의 로컬 시(00~23)
  [2]   플랜 문자 (W=week, M=month)
  [3-5] A-Z0-9 중 무작위 3자
"""
import random
import re
from datetime import datetime, tzinfo
from typing import Optional

CODE_LENGTH = 6
CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
RANDOM_PART_LENGTH = 3
CODE_PATTERN = re.compile(r"^(?:[01]\d|2[0-3])[WM][A-Z0-9]{3}$")


def local_hour(moment: datetime, tz: Optional[tzinfo] = None) -> int:
    """tz 기준 시(hour). tz가 없으면 시스템 로컬 시간대"""
    return moment.astimezone(tz).hour


def generate_access_code(plan_code: str, now: datetime, tz: Optional[tzinfo] = None,
                         rng: random.Random = None) -> str:
    rng = rng or random
    hour_part = f"{local_hour(now, tz):02d}"
    random_part = "".join(rng.choice(CODE_ALPHABET) for _ in range(RANDOM_PART_LENGTH))
    return f"{hour_part}{plan_code}{random_part}"


def is_valid_access_code(code: str) -> bool:
    """형식 검사. 시 부분은 00~23 범위까지 확인한다."""
    return len(code) == CODE_LENGTH and CODE_PATTERN.match(code) is not None


def code_hour(code: str) -> int:
    return int(code[:2])
