from __future__ import annotations

from datetime import date

import pytest

from fuelpanel.state.events import Direction
from fuelpanel.state.window import DateWindow, initial_reference_date, parse_calendar_date, step

_TODAY = date(2024, 3, 11)


class TestInitialReferenceDate:
    def test_defaults_to_today(self) -> None:
        assert initial_reference_date(None, today=_TODAY) == _TODAY

    def test_uses_well_formed_override(self) -> None:
        assert initial_reference_date("2024-03-10", today=_TODAY) == date(2024, 3, 10)

    @pytest.mark.parametrize("override", ["", "yesterday", "2024-13-40", "10/03/2024", "2024-02-30"])
    def test_malformed_override_falls_back_to_today(self, override: str) -> None:
        assert initial_reference_date(override, today=_TODAY) == _TODAY

    def test_future_override_is_clamped(self) -> None:
        assert initial_reference_date("2030-01-01", today=_TODAY) == _TODAY


def test_parse_calendar_date_tolerates_whitespace() -> None:
    assert parse_calendar_date(" 2024-03-10 ") == date(2024, 3, 10)


class TestStep:
    def test_back(self) -> None:
        assert step(date(2024, 3, 1), Direction.BACK, today=_TODAY) == date(2024, 2, 29)

    def test_forward_before_today(self) -> None:
        assert step(date(2024, 3, 10), Direction.FORWARD, today=_TODAY) == _TODAY

    def test_forward_from_today_is_rejected(self) -> None:
        assert step(_TODAY, Direction.FORWARD, today=_TODAY) == _TODAY


class TestDateWindow:
    def test_notifies_listener_on_change(self) -> None:
        window = DateWindow(query_override="2024-03-10", today=lambda: _TODAY)
        seen: list[date] = []
        window.add_listener(seen.append)

        assert window.navigate(Direction.FORWARD) is True
        assert window.reference_date == _TODAY
        assert seen == [_TODAY]

    def test_rejected_step_does_not_notify(self) -> None:
        window = DateWindow(today=lambda: _TODAY)
        seen: list[date] = []
        window.add_listener(seen.append)

        assert window.navigate(Direction.FORWARD) is False
        assert window.reference_date == _TODAY
        assert seen == []

    def test_never_passes_today(self) -> None:
        window = DateWindow(query_override="2024-03-01", today=lambda: _TODAY)
        for _ in range(30):
            window.navigate(Direction.FORWARD)
            assert window.reference_date <= _TODAY
        assert window.reference_date == _TODAY

    def test_can_navigate(self) -> None:
        window = DateWindow(today=lambda: _TODAY)
        assert window.can_navigate(Direction.BACK) is True
        assert window.can_navigate(Direction.FORWARD) is False

    def test_today_is_read_on_every_step(self) -> None:
        clock = {"today": _TODAY}
        window = DateWindow(today=lambda: clock["today"])
        assert window.navigate(Direction.FORWARD) is False

        # Midnight passed while the panel was open.
        clock["today"] = date(2024, 3, 12)
        assert window.navigate(Direction.FORWARD) is True
        assert window.reference_date == date(2024, 3, 12)
