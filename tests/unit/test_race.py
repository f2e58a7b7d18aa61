"""Tests for the fetch task wrapper and the race coordinator."""

import asyncio
import time

import pytest

from core.config import AppSettings
from core.domain.models import FetchFailure, FetchSuccess, RaceStatus
from core.services.race import (
    RaceCoordinator,
    build_default_sources,
    lookup_postal_code,
    normalize_postal_code,
    resolve_postal_code,
    run_fetch_task,
)
from fakes import FakeSource, failing, make_address, succeeding


def _resolve(sources, *, deadline: float = 1.0, call_timeout: float = 1.0, postal_code: str = "01001000"):
    coordinator = RaceCoordinator(sources, deadline=deadline, call_timeout=call_timeout)
    return asyncio.run(coordinator.resolve(postal_code))


class TestRunFetchTask:
    def test_tags_success_with_registered_id(self) -> None:
        source = succeeding()

        outcome = asyncio.run(run_fetch_task("BrasilAPI", source, "01001000", timeout=1.0))

        assert isinstance(outcome, FetchSuccess)
        assert outcome.address.source_id == "BrasilAPI"
        assert source.calls == ["01001000"]

    def test_overrides_label_set_by_source(self) -> None:
        source = FakeSource(FetchSuccess(address=make_address(source_id="self-labelled")))

        outcome = asyncio.run(run_fetch_task("ViaCEP", source, "01001000", timeout=1.0))

        assert isinstance(outcome, FetchSuccess)
        assert outcome.address.source_id == "ViaCEP"

    def test_passes_failure_through(self) -> None:
        outcome = asyncio.run(run_fetch_task("ViaCEP", failing(), "01001000", timeout=1.0))

        assert isinstance(outcome, FetchFailure)
        assert "500" in outcome.reason

    def test_contains_exceptions_from_source(self) -> None:
        source = FakeSource(RuntimeError("adapter bug"))

        outcome = asyncio.run(run_fetch_task("BrasilAPI", source, "01001000", timeout=1.0))

        assert isinstance(outcome, FetchFailure)
        assert "RuntimeError" in outcome.reason
        assert "adapter bug" in outcome.reason

    def test_non_outcome_return_becomes_failure(self) -> None:
        outcome = asyncio.run(run_fetch_task("BrasilAPI", FakeSource(None), "01001000", timeout=1.0))

        assert isinstance(outcome, FetchFailure)
        assert "unexpected outcome NoneType" in outcome.reason

    def test_bounds_call_with_timeout(self) -> None:
        source = succeeding(delay=2.0)

        started = time.monotonic()
        outcome = asyncio.run(run_fetch_task("BrasilAPI", source, "01001000", timeout=0.05))
        elapsed = time.monotonic() - started

        assert isinstance(outcome, FetchFailure)
        assert "timed out" in outcome.reason
        assert elapsed < 1.0
        assert source.cancelled


class TestRaceWinner:
    def test_fast_source_wins(self) -> None:
        result = _resolve(
            {"A": succeeding(delay=0.01, city="Fast"), "B": succeeding(delay=0.5, city="Slow")},
            deadline=1.0,
        )

        assert result.status is RaceStatus.WINNER
        assert result.ok
        assert result.address is not None
        assert result.address.source_id == "A"
        assert result.address.city == "Fast"

    def test_winner_follows_latency_not_registration_order(self) -> None:
        result = _resolve(
            {"A": succeeding(delay=0.5, city="Slow"), "B": succeeding(delay=0.01, city="Fast")},
        )

        assert result.address is not None
        assert result.address.source_id == "B"

    def test_returns_without_waiting_for_slower_source(self) -> None:
        result = _resolve(
            {"A": succeeding(delay=0.01), "B": succeeding(delay=0.8)},
            deadline=1.0,
        )

        assert result.elapsed_seconds < 0.5

    def test_failure_does_not_stop_race(self) -> None:
        result = _resolve(
            {"A": failing(delay=0.0), "B": succeeding(delay=0.05, city="Backup")},
        )

        assert result.status is RaceStatus.WINNER
        assert result.address is not None
        assert result.address.source_id == "B"

    def test_raising_source_does_not_stop_race(self) -> None:
        result = _resolve(
            {"A": FakeSource(ValueError("bad payload")), "B": succeeding(delay=0.05)},
        )

        assert result.status is RaceStatus.WINNER
        assert result.address is not None
        assert result.address.source_id == "B"

    def test_non_outcome_return_does_not_stop_race(self) -> None:
        result = _resolve(
            {"A": FakeSource(None), "B": succeeding(delay=0.05, city="Backup")},
        )

        assert result.status is RaceStatus.WINNER
        assert result.address is not None
        assert result.address.source_id == "B"

    def test_slower_source_is_cancelled(self) -> None:
        slow = succeeding(delay=0.5)

        async def scenario():
            coordinator = RaceCoordinator({"A": succeeding(delay=0.01), "B": slow}, deadline=1.0)
            result = await coordinator.resolve("01001000")
            await asyncio.sleep(0.02)
            return result

        result = asyncio.run(scenario())

        assert result.address is not None
        assert result.address.source_id == "A"
        assert slow.cancelled

    def test_idempotent_with_same_sources(self) -> None:
        sources = {"A": succeeding(delay=0.01, city="Fast"), "B": succeeding(delay=0.3, city="Slow")}

        first = _resolve(sources)
        second = _resolve(sources)

        assert first.address == second.address
        assert first.status is second.status is RaceStatus.WINNER


class TestRaceFailure:
    def test_all_failures_resolve_before_deadline(self) -> None:
        result = _resolve({"A": failing(), "B": failing(delay=0.02)}, deadline=1.0)

        assert result.status is RaceStatus.NO_SUCCESS
        assert result.address is None
        assert not result.ok
        assert result.elapsed_seconds < 0.5

    def test_all_slow_sources_time_out_at_deadline(self) -> None:
        result = _resolve(
            {"A": succeeding(delay=2.0), "B": succeeding(delay=2.0)},
            deadline=0.2,
            call_timeout=5.0,
        )

        assert result.status is RaceStatus.TIMEOUT
        assert result.address is None
        assert 0.15 <= result.elapsed_seconds < 0.6

    def test_late_success_is_discarded(self) -> None:
        late = succeeding(delay=0.3)

        async def scenario():
            coordinator = RaceCoordinator({"A": late}, deadline=0.1, call_timeout=1.0)
            result = await coordinator.resolve("01001000")
            await asyncio.sleep(0.02)
            return result

        result = asyncio.run(scenario())

        assert result.status is RaceStatus.TIMEOUT
        assert result.address is None
        assert late.cancelled

    def test_failure_then_timeout(self) -> None:
        result = _resolve(
            {"A": failing(), "B": succeeding(delay=2.0)},
            deadline=0.2,
            call_timeout=5.0,
        )

        assert result.status is RaceStatus.TIMEOUT


class TestCoordinatorValidation:
    def test_requires_sources(self) -> None:
        with pytest.raises(ValueError, match="at least one source"):
            RaceCoordinator({})

    @pytest.mark.parametrize("deadline", [0.0, -1.0])
    def test_requires_positive_deadline(self, deadline: float) -> None:
        with pytest.raises(ValueError, match="deadline"):
            RaceCoordinator({"A": succeeding()}, deadline=deadline)

    def test_warns_when_deadline_shorter_than_call_timeout(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="core.services.race"):
            RaceCoordinator({"A": succeeding()}, deadline=0.5, call_timeout=1.0)

        assert "shorter than the per-call timeout" in caplog.text

    def test_from_settings_registers_default_sources(self, settings: AppSettings) -> None:
        coordinator = RaceCoordinator.from_settings(settings)

        assert coordinator.source_ids == ["BrasilAPI", "ViaCEP"]


class TestEntryPoints:
    def test_resolve_postal_code_with_injected_sources(self, settings: AppSettings) -> None:
        result = asyncio.run(
            resolve_postal_code("01001000", settings=settings, sources={"Fake": succeeding()})
        )

        assert result.postal_code == "01001000"
        assert result.address is not None
        assert result.address.source_id == "Fake"

    def test_lookup_postal_code_is_synchronous(self, settings: AppSettings) -> None:
        result = lookup_postal_code("01001000", settings=settings, sources={"Fake": failing()})

        assert result.status is RaceStatus.NO_SUCCESS

    def test_default_registry(self, settings: AppSettings) -> None:
        sources = build_default_sources(settings)

        assert list(sources) == ["BrasilAPI", "ViaCEP"]


class TestNormalizePostalCode:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("01001000", "01001000"),
            ("01001-000", "01001000"),
            (" 01.001-000 ", "01001000"),
            ("", ""),
        ],
    )
    def test_strips_separators(self, raw: str, expected: str) -> None:
        assert normalize_postal_code(raw) == expected
