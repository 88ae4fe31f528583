from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.ticketing import (
    FakeTicketSource,
    RecordingReporter,
    make_event_config,
    make_organizer,
)
from ticketsync import main as main_module
from ticketsync.config import ConfigurationError, SyncConfig
from ticketsync.domain.model import SourceItem
from ticketsync.domain.scheduling import SyncScheduler

if TYPE_CHECKING:
    from collections.abc import Callable

    from ticketsync.adapters.sqlalchemy import SqlAlchemyTicketingUnitOfWork


def _scheduler(
    factory: Callable[[], SqlAlchemyTicketingUnitOfWork], *, healthy: bool = True
) -> SyncScheduler:
    event = make_event_config("conf", active_item_ids=("1",))
    source = FakeTicketSource(
        organizers=(make_organizer(event),),
        events={"conf": "Conf"},
        items={"conf": [SourceItem("1", "GA")] if healthy else []},
    )
    return SyncScheduler(
        source=source, unit_of_work_factory=factory, reporter=RecordingReporter()
    )


def test_main_once_runs_a_single_cycle(
    monkeypatch: pytest.MonkeyPatch,
    sqlite_unit_of_work: Callable[[], SqlAlchemyTicketingUnitOfWork],
) -> None:
    captured: dict[str, object] = {}
    scheduler = _scheduler(sqlite_unit_of_work)

    def fake_build(**kwargs: object) -> SyncScheduler:
        captured.update(kwargs)
        return scheduler

    monkeypatch.setattr(main_module, "build_sync_service", fake_build)
    installed: list[bool] = []
    monkeypatch.setattr(main_module, "install_exit_handlers", lambda: installed.append(True))

    main_module.main(["--once", "--interval", "5"])

    assert installed == [True]
    assert captured["sync_config"] == SyncConfig(interval_seconds=5.0)
    assert scheduler.has_completed_sync
    assert scheduler.last_report is not None


def test_main_once_exits_non_zero_on_failed_event(
    monkeypatch: pytest.MonkeyPatch,
    sqlite_unit_of_work: Callable[[], SqlAlchemyTicketingUnitOfWork],
) -> None:
    scheduler = _scheduler(sqlite_unit_of_work, healthy=False)
    monkeypatch.setattr(main_module, "build_sync_service", lambda **_: scheduler)
    monkeypatch.setattr(main_module, "install_exit_handlers", lambda: None)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--once"])

    assert excinfo.value.code == 1


def test_main_without_configured_events(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main_module, "build_sync_service", lambda **_: None)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main([])

    assert excinfo.value.code == 0


def test_main_rejects_non_positive_interval(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main_module, "build_sync_service", lambda **_: None)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--interval", "0"])

    assert excinfo.value.code == 2


def test_main_reports_configuration_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_build(**_: object) -> SyncScheduler:
        raise ConfigurationError("Organizers file not found: /nope.toml")

    monkeypatch.setattr(main_module, "build_sync_service", broken_build)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--once"])

    assert excinfo.value.code == 2


def test_main_runs_the_service_without_process_exit_handlers(
    monkeypatch: pytest.MonkeyPatch,
    sqlite_unit_of_work: Callable[[], SqlAlchemyTicketingUnitOfWork],
) -> None:
    scheduler = _scheduler(sqlite_unit_of_work)
    served: list[SyncScheduler] = []
    installed: list[bool] = []

    async def fake_service(target: SyncScheduler) -> None:
        served.append(target)

    monkeypatch.setattr(main_module, "build_sync_service", lambda **_: scheduler)
    monkeypatch.setattr(main_module, "run_sync_service", fake_service)
    monkeypatch.setattr(main_module, "install_exit_handlers", lambda: installed.append(True))

    main_module.main([])

    assert served == [scheduler]
    assert installed == []
