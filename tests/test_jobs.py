"""本地运维脚本测试"""
from unittest.mock import Mock, patch

from app.jobs import manual_cleanup, seed_admin


class TestManualCleanup:

    def test_run_cleanup(self):
        db_mock = Mock()
        service_mock = Mock()
        service_mock.cleanup_expired_resets.return_value = 3

        with patch('app.jobs.manual_cleanup.SessionLocal', return_value=db_mock), \
             patch('app.jobs.manual_cleanup.AccountService', return_value=service_mock):

            assert manual_cleanup.run_cleanup(batch_size=50) == 3

        service_mock.cleanup_expired_resets.assert_called_once_with(50)
        db_mock.commit.assert_called_once()
        db_mock.close.assert_called_once()

    def test_run_cleanup_dry_run(self):
        service_mock = Mock()
        service_mock.count_stale_resets.return_value = 7

        with patch('app.jobs.manual_cleanup.SessionLocal'), \
             patch('app.jobs.manual_cleanup.AccountService', return_value=service_mock):

            assert manual_cleanup.run_cleanup(dry_run=True) == 7

        service_mock.cleanup_expired_resets.assert_not_called()

    def test_main_returns_error_code_on_failure(self, capsys):
        with patch('app.jobs.manual_cleanup.run_cleanup', side_effect=Exception("数据库不可用")):
            assert manual_cleanup.main(["--batch-size", "10"]) == 1

        assert "数据库不可用" in capsys.readouterr().out


class TestSeedAdmin:

    def test_main_creates_admin(self, capsys):
        user = Mock(username="ops", role="admin")

        with patch('app.jobs.seed_admin.seed_admin', return_value=(user, True)) as mock_seed:
            assert seed_admin.main(["--username", "ops", "--password", "pw"]) == 0

        mock_seed.assert_called_once_with("ops", "pw", "admin")
        assert "ops" in capsys.readouterr().out
