"""Tests for the timeline viewer view-state."""

import asyncio

import pytest

from tests.ui.fakes import FakeTimelineApi, make_rows
from timeline_api.schemas.objects import OptionSchema
from timeline_ui.state import LoadState
from timeline_ui.viewer import ObjectTypeFilter, TimelineViewer


def _viewer(api: FakeTimelineApi, **kwargs) -> TimelineViewer:
    return TimelineViewer(api, "001A", "Account", **kwargs)  # type: ignore[arg-type]


class TestLoad:
    """Tests for the initial load."""

    @pytest.mark.asyncio
    async def test_first_page_of_larger_timeline(self) -> None:
        """50 of 120 rows loaded; more are available."""
        api = FakeTimelineApi(make_rows(120))
        viewer = _viewer(api)

        await viewer.load()

        assert viewer.state == LoadState.READY
        assert len(viewer.rows) == 50
        assert viewer.offset == 50
        assert viewer.total_record_count == 120
        assert viewer.has_more is True
        assert viewer.object_label == "Account"
        assert viewer.has_config_access is True
        assert [t.value for t in viewer.object_types] == ["Account", "Contact"]
        assert all(t.selected for t in viewer.object_types)

    @pytest.mark.asyncio
    async def test_short_timeline_has_no_more(self) -> None:
        viewer = _viewer(FakeTimelineApi(make_rows(7)))
        await viewer.load()

        assert len(viewer.rows) == 7
        assert viewer.has_more is False
        assert viewer.header_title == "Account History (7)"

    @pytest.mark.asyncio
    async def test_empty_timeline(self) -> None:
        viewer = _viewer(FakeTimelineApi([]))
        await viewer.load()

        assert viewer.is_ready
        assert viewer.has_records is False
        assert viewer.empty_message == "No timeline records found for this record."
        assert viewer.header_title == "Account History"

    @pytest.mark.asyncio
    async def test_page_failure_sets_error(self) -> None:
        api = FakeTimelineApi(make_rows(10))
        api.fail.add("get_timeline_data")
        viewer = _viewer(api)

        await viewer.load()

        assert viewer.has_error
        assert viewer.error_message == "get_timeline_data failed"

    @pytest.mark.asyncio
    async def test_label_failure_falls_back_to_api_name(self) -> None:
        api = FakeTimelineApi(make_rows(3))
        api.fail.add("get_object_info")
        viewer = _viewer(api)

        await viewer.load()

        assert viewer.is_ready
        assert viewer.object_label == "Account"

    @pytest.mark.asyncio
    async def test_object_type_failure_derives_filters_from_rows(self) -> None:
        api = FakeTimelineApi(make_rows(4))
        api.fail.add("get_available_object_types")
        viewer = _viewer(api)

        await viewer.load()

        assert viewer.object_types == [
            ObjectTypeFilter("Account", "Account"),
            ObjectTypeFilter("Contact", "Contact"),
        ]

    @pytest.mark.asyncio
    async def test_permission_failure_denies_config(self) -> None:
        api = FakeTimelineApi(make_rows(3))
        api.fail.add("has_config_permission")
        viewer = _viewer(api)

        await viewer.load()

        assert viewer.has_config_access is False
        assert viewer.open_config() is False
        assert viewer.show_config_modal is False

    def test_title_override_and_filter_flag(self) -> None:
        viewer = _viewer(FakeTimelineApi(), title="Activity", show_filters="false")
        assert viewer.header_title == "Activity"
        assert viewer.show_filters is False


class TestLoadMore:
    """Tests for paging."""

    @pytest.mark.asyncio
    async def test_pages_until_exhausted(self) -> None:
        api = FakeTimelineApi(make_rows(120))
        viewer = _viewer(api)
        await viewer.load()

        await viewer.load_more()
        assert len(viewer.rows) == 100
        assert viewer.has_more is True

        await viewer.load_more()
        assert len(viewer.rows) == 120
        assert viewer.offset == 120
        assert viewer.has_more is False
        assert [r.id for r in viewer.rows] == [r.id for r in api.rows]

    @pytest.mark.asyncio
    async def test_noop_when_nothing_more(self) -> None:
        api = FakeTimelineApi(make_rows(10))
        viewer = _viewer(api)
        await viewer.load()
        calls_before = api.count("get_timeline_data")

        await viewer.load_more()

        assert api.count("get_timeline_data") == calls_before
        assert len(viewer.rows) == 10
        assert viewer.state == LoadState.READY

    @pytest.mark.asyncio
    async def test_exact_multiple_ends_on_offset(self) -> None:
        """100 rows with page size 50: the second page ends paging."""
        viewer = _viewer(FakeTimelineApi(make_rows(100)))
        await viewer.load()
        await viewer.load_more()

        assert viewer.offset == 100
        assert viewer.has_more is False

    @pytest.mark.asyncio
    async def test_failure_keeps_loaded_rows(self) -> None:
        api = FakeTimelineApi(make_rows(120))
        viewer = _viewer(api)
        await viewer.load()
        api.fail.add("get_timeline_data")

        await viewer.load_more()

        assert viewer.has_error
        assert len(viewer.rows) == 50
        assert viewer.offset == 50

    @pytest.mark.asyncio
    async def test_failed_refresh_waits_for_retry(self) -> None:
        api = FakeTimelineApi(make_rows(120))
        viewer = _viewer(api)
        await viewer.load()
        api.fail.add("get_timeline_data")

        await viewer.refresh()

        assert viewer.state == LoadState.ERROR
        assert viewer.offset == 50
        assert viewer.has_more is False

        api.fail.clear()
        await viewer.load_more()
        assert viewer.state == LoadState.ERROR
        assert len(viewer.rows) == 50

        await viewer.refresh()
        ids = [row.id for row in viewer.rows]
        assert len(ids) == len(set(ids)) == 50
        assert viewer.offset == 50
        assert viewer.is_ready

    @pytest.mark.asyncio
    async def test_load_more_ignored_after_failure(self) -> None:
        api = FakeTimelineApi(make_rows(120))
        viewer = _viewer(api)
        await viewer.load()
        api.fail.add("get_timeline_data")
        await viewer.load_more()
        calls = api.count("get_timeline_data")

        api.fail.clear()
        await viewer.load_more()

        assert api.count("get_timeline_data") == calls
        assert len(viewer.rows) == 50

    @pytest.mark.asyncio
    async def test_refresh_discards_stale_page(self) -> None:
        """A load_more that resolves after a refresh is dropped."""
        api = FakeTimelineApi(make_rows(120))
        viewer = _viewer(api)
        await viewer.load()

        release = asyncio.Event()
        original = api.get_timeline_data

        async def slow_page(record_id, object_api_name, limit, offset=0):
            if offset == 50:
                await release.wait()
            return await original(record_id, object_api_name, limit, offset)

        api.get_timeline_data = slow_page  # type: ignore[method-assign]

        pending = asyncio.create_task(viewer.load_more())
        await asyncio.sleep(0)
        await viewer.refresh()
        release.set()
        await pending

        assert len(viewer.rows) == 50
        assert viewer.offset == 50
        assert viewer.is_ready


class TestFilters:
    """Tests for object type filters."""

    @pytest.mark.asyncio
    async def test_toggle_hides_type(self) -> None:
        viewer = _viewer(FakeTimelineApi(make_rows(6)))
        await viewer.load()

        viewer.toggle_filter("Contact")

        assert {r.object_api_name for r in viewer.visible_rows} == {"Account"}
        assert viewer.selected_filters == ["Account"]
        assert viewer.object_types[1].variant == "neutral"
        assert viewer.header_title == "Account History (3)"

    @pytest.mark.asyncio
    async def test_toggle_twice_restores(self) -> None:
        viewer = _viewer(FakeTimelineApi(make_rows(6)))
        await viewer.load()

        viewer.toggle_filter("Contact")
        viewer.toggle_filter("Contact")

        assert len(viewer.visible_rows) == 6

    @pytest.mark.asyncio
    async def test_unknown_value_ignored(self) -> None:
        viewer = _viewer(FakeTimelineApi(make_rows(6)))
        await viewer.load()
        before = list(viewer.object_types)

        viewer.toggle_filter("Nope")

        assert viewer.object_types == before

    @pytest.mark.asyncio
    async def test_clear_all_shows_nothing(self) -> None:
        viewer = _viewer(FakeTimelineApi(make_rows(6)))
        await viewer.load()

        viewer.clear_all()

        assert viewer.visible_rows == []
        assert viewer.empty_message == (
            "No filters selected. Please select at least one object type to view."
        )

        viewer.select_all()
        assert len(viewer.visible_rows) == 6

    @pytest.mark.asyncio
    async def test_items_wrap_visible_rows(self) -> None:
        viewer = _viewer(FakeTimelineApi(make_rows(4)))
        await viewer.load()

        items = viewer.items
        assert [i.is_history_record for i in items] == [True, False, True, False]


class TestConfigModal:
    """Tests for the config modal hooks."""

    @pytest.mark.asyncio
    async def test_config_saved_closes_and_refreshes(self) -> None:
        api = FakeTimelineApi(make_rows(6))
        viewer = _viewer(api)
        await viewer.load()
        viewer.toggle_filter("Contact")

        assert viewer.open_config() is True
        api.object_types.append(OptionSchema(label="Opportunity", value="Opportunity"))
        await viewer.config_saved()

        assert viewer.show_config_modal is False
        assert api.count("get_timeline_data") == 2
        assert [(t.value, t.selected) for t in viewer.object_types] == [
            ("Account", True),
            ("Contact", False),
            ("Opportunity", True),
        ]

    def test_close_config(self) -> None:
        viewer = _viewer(FakeTimelineApi())
        viewer.has_config_access = True
        viewer.open_config()
        viewer.close_config()
        assert viewer.show_config_modal is False
