from __future__ import annotations

import asyncio

import pytest

from core.errors import ApplicationError, EmptyDataError, ProviderError
from dashboard import session
from dashboard.controller import DashboardController


@pytest.mark.asyncio
async def test_start_opens_summary_sheet(fake_fetcher, settings):
    controller = DashboardController(fake_fetcher, settings)
    state = await controller.start()

    assert state.sheet_names == ("January", "Summary 2026")
    assert state.sheet_name == "Summary 2026"
    assert state.summary is state.table
    assert len(state.result) == 2


@pytest.mark.asyncio
async def test_start_reports_sheet_list_failure(fetcher_factory, settings):
    errors = []
    fetcher = fetcher_factory({}, errors={"__names__": ProviderError(500, "boom")})
    controller = DashboardController(fetcher, settings, notify=errors.append)

    state = await controller.start()

    assert state.sheet_names == ()
    assert isinstance(errors[0], ProviderError)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ProviderError(503, "down"), ApplicationError("Sheet not found"), EmptyDataError("empty")],
)
async def test_failed_load_keeps_previous_state(fake_fetcher, settings, error):
    errors = []
    fake_fetcher.errors["Broken"] = error
    controller = DashboardController(fake_fetcher, settings, notify=errors.append)
    await controller.select_sheet("January")
    before = controller.state

    applied = await controller.select_sheet("Broken")

    assert applied is False
    assert controller.state is before
    assert errors == [error]


@pytest.mark.asyncio
async def test_empty_sheet_is_reported_as_empty_data(fetcher_factory, settings):
    errors = []
    fetcher = fetcher_factory({"Blank": [["ID", "Name"], ["", ""]]})
    controller = DashboardController(fetcher, settings, notify=errors.append)

    assert await controller.select_sheet("Blank") is False
    assert isinstance(errors[0], EmptyDataError)


@pytest.mark.asyncio
async def test_stale_response_is_discarded(fetcher_factory, sample_sheet, attendance_sheet, settings):
    fetcher = fetcher_factory(
        {"Slow": attendance_sheet, "Fast": sample_sheet},
        delays={"Slow": 0.05},
    )
    controller = DashboardController(fetcher, settings)

    slow = asyncio.ensure_future(controller.select_sheet("Slow"))
    await asyncio.sleep(0)
    fast = await controller.select_sheet("Fast")
    slow_applied = await slow

    assert fast is True
    assert slow_applied is False
    assert controller.state.sheet_name == "Fast"


@pytest.mark.asyncio
async def test_search_is_debounced_last_write_wins(fake_fetcher, settings):
    controller = DashboardController(fake_fetcher, settings)
    await controller.select_sheet("January")

    first = controller.search("chan")
    second = controller.search("bopha")
    await second

    assert first.cancelled()
    assert controller.state.keyword == "bopha"
    assert [r[1] for r in controller.state.result] == ["Bopha"]


@pytest.mark.asyncio
async def test_search_waits_for_quiet_period(fake_fetcher, settings):
    controller = DashboardController(fake_fetcher, settings)
    await controller.select_sheet("January")

    task = controller.search("chan")
    await asyncio.sleep(0)
    assert controller.state.keyword == ""

    await task
    assert controller.state.keyword == "chan"


@pytest.mark.asyncio
async def test_clear_search_cancels_pending(fake_fetcher, settings):
    controller = DashboardController(fake_fetcher, settings)
    await controller.select_sheet("January")

    task = controller.search("chan")
    controller.clear_search()
    await asyncio.sleep(settings.filter_debounce_seconds * 2)

    assert task.cancelled()
    assert controller.state.keyword == ""
    assert len(controller.state.result) == 3


@pytest.mark.asyncio
async def test_sort_and_paging(fake_fetcher, settings):
    controller = DashboardController(fake_fetcher, settings)
    await controller.select_sheet("January")

    controller.sort(False)
    assert [r[1] for r in controller.state.result] == ["chan dara", "Bopha", "Anh Sok BRORSER"]

    assert controller.next_page().page_index == 1
    assert controller.goto_page(9).page_index == 1
    assert controller.previous_page().page_index == 1


@pytest.mark.asyncio
async def test_open_summary_loads_once(fake_fetcher, settings):
    controller = DashboardController(fake_fetcher, settings)
    controller.state = session.with_sheet_names(controller.state, ["January", "Summary 2026"])

    summary = await controller.open_summary()
    again = await controller.open_summary()

    assert summary is again
    assert summary.header == ("ID", "Name", "Total Scan")
    assert fake_fetcher.calls == ["Summary 2026"]


@pytest.mark.asyncio
async def test_open_summary_without_summary_sheet(fetcher_factory, settings):
    controller = DashboardController(fetcher_factory({"January": [["ID"], ["1"]]}), settings)
    await controller.start()

    assert await controller.open_summary() is None
