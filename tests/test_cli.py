"""Tests for the command line entry point."""

import pytest

from main import build_parser, main


class TestCommands:
    def test_availability(self, capsys):
        assert main(["availability", "V1", "2024-03-04"]) == 0
        out = capsys.readouterr().out
        assert "MON-0900" in out
        assert "MON-1300" not in out

    def test_book_until_full(self, capsys):
        assert main(["book", "V1", "2024-03-04", "MON-1200", "--repeat", "3"]) == 1
        out = capsys.readouterr().out
        assert out.count("OK") == 2
        assert "SLOT_FULL" in out

    def test_book_on_holiday(self, capsys):
        assert main(["book", "V1", "2025-12-25", "THU-1000"]) == 1
        assert "HOLIDAY" in capsys.readouterr().out

    def test_status_walk(self, capsys):
        assert main(["status", "V1", "2024-03-04", "MON-1000", "--to", "CONFIRMED", "COMPLETED"]) == 0
        assert '"status": "COMPLETED"' in capsys.readouterr().out

    def test_status_invalid_transition(self, capsys):
        assert main(["status", "V1", "2024-03-04", "MON-1000", "--to", "COMPLETED"]) == 1
        assert "INVALID_TRANSITION" in capsys.readouterr().out

    def test_calendar_week(self, capsys):
        assert main(["calendar", "week", "2024-12-25"]) == 0
        assert "Christmas Day" in capsys.readouterr().out

    def test_bad_date_reported(self, capsys):
        assert main(["availability", "V1", "tomorrow"]) == 2
        assert "VALIDATION" in capsys.readouterr().out

    def test_unknown_view_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["calendar", "year", "2024-01-01"])

    def test_unknown_resource_reported(self, capsys):
        assert main(["availability", "V9", "2024-03-04"]) == 2
        assert "NOT_FOUND" in capsys.readouterr().out
