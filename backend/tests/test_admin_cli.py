"""
관리자 CLI 명령 테스트
"""
import pytest

from domain.exceptions import KeyNotFoundError


@pytest.fixture
def admin(monkeypatch, tmp_path):
    # tools/admin.py 는 import 시 backend 디렉토리로 chdir 한다 — 테스트 후 원래 위치로 복원
    monkeypatch.chdir(tmp_path)
    from tools import admin as admin_module
    return admin_module


class TestAdminCli:

    @pytest.mark.asyncio
    async def test_issue_list_stats_clear(self, admin, repository, capsys):
        await admin.cmd_issue(repository, "week")
        await admin.cmd_issue(repository, "month")
        assert "발급 완료" in capsys.readouterr().out

        await admin.cmd_list(repository, unused_only=True)
        out = capsys.readouterr().out
        assert "액세스 키 (2건)" in out
        assert "week" in out and "month" in out

        await admin.cmd_stats(repository)
        out = capsys.readouterr().out
        assert "전체: 2건" in out
        assert "미사용: 2건" in out

        await admin.cmd_clear(repository)
        assert "2건 삭제 완료" in capsys.readouterr().out

        await admin.cmd_list(repository, unused_only=False)
        assert "등록된 액세스 키가 없습니다." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_validate_unknown_code(self, admin, repository):
        with pytest.raises(KeyNotFoundError):
            await admin.cmd_validate(repository, "14WZZZ", "u1")
