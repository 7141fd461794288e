"""Tests for the chat log summary."""

import pytest

from loanbot import config, db, report


@pytest.fixture
def log_path(tmp_path):
    path = str(tmp_path / "chat.db")
    db.create_db(path)
    db.save_chat("a", "hello", "Hi", "greeting", 1.0, db_path=path)
    db.save_chat("a", "hello", "Hi", "greeting", 1.0, db_path=path)
    db.save_chat(None, "emi?", "No EMI", "repayment", 0.8, db_path=path)
    return path


class TestChatStats:
    def test_summary(self, log_path, capsys):
        report.print_chat_stats(log_path)
        out = capsys.readouterr().out
        assert "Total queries: 3" in out
        assert "Distinct intents: 2" in out
        assert "-: emi? -> repayment (80.0%)" in out
        assert "2x hello" in out

    def test_stats_flag(self, log_path, capsys):
        report.main(["--stats", "--db", log_path])
        assert "Total queries: 3" in capsys.readouterr().out

    def test_stats_needs_a_log(self, monkeypatch):
        monkeypatch.setattr(config, "CHAT_DB_PATH", "")
        with pytest.raises(SystemExit):
            report.main(["--stats"])

    @pytest.mark.parametrize("conf, expected", [(None, "-"), (0.5, "50.0%"), (72, "72.0%")])
    def test_format_confidence(self, conf, expected):
        assert report.format_confidence(conf) == expected
