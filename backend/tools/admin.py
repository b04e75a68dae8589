"""액세스 키 관리 CLI 도구

사용법:
  python tools/admin.py stats                     키 현황 요약
  python tools/admin.py list                      전체 키 목록
  python tools/admin.py list --unused             미사용 키만
  python tools/admin.py issue week                키 발급 (week|month)
  python tools/admin.py validate 14WAB3 --user u1 키 사용 처리
  python tools/admin.py clear --yes               전체 키 삭제
"""
import argparse
import asyncio
import os
import sys
from pathlib import Path

# 저장소 상대 경로가 올바르게 해석되도록 backend 디렉토리로 이동
BACKEND_DIR = Path(__file__).resolve().parent.parent
os.chdir(BACKEND_DIR)
sys.path.insert(0, str(BACKEND_DIR))

from config import settings
from domain.exceptions import DomainError
from infrastructure.persistence.factory import build_key_repository
from application.use_cases.issue_access_key import IssueAccessKeyUseCase, IssueAccessKeyInput
from application.use_cases.validate_access_key import ValidateAccessKeyUseCase, ValidateAccessKeyInput
from application.use_cases.manage_access_keys import (
    ListAccessKeysUseCase, ClearAccessKeysUseCase, AccessKeyStatsUseCase,
)


# ==================== 유틸 ====================

def fmt_date(dt) -> str:
    if not dt:
        return "-"
    return dt.astimezone(settings.key_tz).strftime("%Y-%m-%d %H:%M")


def print_table(headers: list, rows: list, col_widths: list = None):
    """간단한 테이블 출력"""
    if not col_widths:
        col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                      for i, h in enumerate(headers)]

    header_line = "".join(str(h).ljust(w) for h, w in zip(headers, col_widths))
    print(header_line)
    print("-" * len(header_line))
    for row in rows:
        print("".join(str(c).ljust(w) for c, w in zip(row, col_widths)))


async def run_with_repository(fn):
    repo = build_key_repository(settings)
    await repo.init()
    try:
        return await fn(repo)
    finally:
        await repo.close()


# ==================== 명령어 ====================

async def cmd_stats(repo):
    """키 현황 요약"""
    stats = await AccessKeyStatsUseCase(repo).execute()
    print("=== 액세스 키 현황 ===\n")
    print(f"전체: {stats.total}건")
    print(f"  미사용: {stats.unused}건")
    print(f"  사용됨: {stats.used}건")
    print(f"  만료:   {stats.expired}건")
    print("\n[플랜별]")
    for plan, count in stats.by_plan.items():
        print(f"  {plan}: {count}건")


async def cmd_list(repo, unused_only: bool):
    """키 목록"""
    keys = await ListAccessKeysUseCase(repo).execute()
    if unused_only:
        keys = [k for k in keys if not k.used]

    if not keys:
        print("등록된 액세스 키가 없습니다.")
        return

    headers = ["코드", "플랜", "발급", "만료", "사용", "사용자"]
    rows = [[k.code, k.plan.value, fmt_date(k.created_at), fmt_date(k.expires_at),
             fmt_date(k.used_at) if k.used else "미사용", k.used_by or "-"] for k in keys]
    print(f"액세스 키 ({len(rows)}건):\n")
    print_table(headers, rows)


async def cmd_issue(repo, plan: str):
    """키 발급"""
    use_case = IssueAccessKeyUseCase(repo, tz=settings.key_tz)
    result = await use_case.execute(IssueAccessKeyInput(plan=plan))
    print(f"발급 완료: {result.code} ({result.plan}, 만료 {fmt_date(result.expires_at)})")


async def cmd_validate(repo, code: str, user_id: str):
    """키 사용 처리"""
    use_case = ValidateAccessKeyUseCase(repo, tz=settings.key_tz, anonymous_user=settings.ANONYMOUS_USER)
    result = await use_case.execute(ValidateAccessKeyInput(code=code, user_id=user_id))
    print(f"사용 처리 완료: {code} → {result.plan} (만료 {fmt_date(result.expires_at)})")


async def cmd_clear(repo):
    """전체 키 삭제"""
    deleted = await ClearAccessKeysUseCase(repo).execute()
    print(f"{deleted}건 삭제 완료")


# ==================== 메인 ====================

def main():
    parser = argparse.ArgumentParser(
        description="액세스 키 관리 CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
명령어:
  stats                          키 현황 요약
  list [--unused]                키 목록
  issue <week|month>             키 발급
  validate <code> [--user ID]    키 사용 처리
  clear --yes                    전체 키 삭제
        """,
    )
    parser.add_argument("command", help="명령어")
    parser.add_argument("args", nargs="*", help="추가 인자")
    parser.add_argument("--unused", action="store_true", help="미사용 키만 (list 명령)")
    parser.add_argument("--user", help="사용자 ID (validate 명령)")
    parser.add_argument("--yes", action="store_true", help="삭제 확인 (clear 명령)")

    args = parser.parse_args()
    cmd = args.command

    if cmd == "stats":
        command = cmd_stats
    elif cmd == "list":
        command = lambda repo: cmd_list(repo, args.unused)
    elif cmd == "issue":
        if not args.args:
            parser.error("플랜을 지정해주세요: admin.py issue <week|month>")
        command = lambda repo: cmd_issue(repo, args.args[0])
    elif cmd == "validate":
        if not args.args:
            parser.error("코드를 지정해주세요: admin.py validate <code> [--user ID]")
        command = lambda repo: cmd_validate(repo, args.args[0], args.user)
    elif cmd == "clear":
        if not args.yes:
            parser.error("전체 삭제는 --yes 옵션이 필요합니다.")
        command = cmd_clear
    else:
        parser.error(f"알 수 없는 명령: {cmd}")

    try:
        asyncio.run(run_with_repository(command))
    except DomainError as e:
        print(f"실패 [{e.code}]: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
