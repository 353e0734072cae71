"""Tests for the httpx-backed table service, using an in-process transport."""

import json

import httpx
import pytest

from lazytable.domain.models import Filter, SortState
from lazytable.errors import DataServiceError, RowNotFoundError
from lazytable.services import HttpTableService, InMemoryTableService

from conftest import build_table, make_people

BASE_URL = "http://table.test/api"


def _backend(entries):
    """Return a request handler answering like a real table API."""
    service = InMemoryTableService(entries)
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        requests.append((request.url.path, body))
        filter_ = Filter.from_dict(body["filter"])
        filtered = service.filtered(filter_)
        if request.url.path.endswith("/batch"):
            rows = filtered[body["startIndex"]:body["endIndex"]]
            return httpx.Response(
                200,
                json={"rows": rows, "filteredCount": len(filtered), "totalCount": service.total_size},
            )
        index = body["index"]
        row = filtered[index] if 0 <= index < len(filtered) else None
        return httpx.Response(200, json={"row": row})

    handler.requests = requests
    return handler


def _service(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTableService(BASE_URL + "/", client=client), client


class TestHttpTableService:
    def test_fetch_batch_posts_filter_and_range(self, run):
        handler = _backend(make_people(40))
        service, _ = _service(handler)
        filter_ = Filter.empty(6).with_column_filter(3, "kobe").with_sorter(0, SortState.DESC)

        rows, filtered, total = run(service.fetch_batch(filter_, 0, 3))

        assert [row["id"] for row in rows] == [39, 34, 29]
        assert (filtered, total) == (8, 40)
        path, body = handler.requests[0]
        assert path == "/api/batch"
        assert body["startIndex"] == 0 and body["endIndex"] == 3
        assert body["filter"] == {
            "ColumnFilters": ["", "", "", "kobe", "", ""],
            "ColumnSorter": {"column": 0, "state": "desc"},
        }

    def test_fetch_one(self, run):
        handler = _backend(make_people(10))
        service, _ = _service(handler)

        entry = run(service.fetch_one(Filter.empty(6), 4))

        assert entry["name"] == "Person 5"
        assert handler.requests[0][0] == "/api/entry"

    def test_missing_row_raises_not_found(self, run):
        service, _ = _service(_backend(make_people(10)))

        with pytest.raises(RowNotFoundError):
            run(service.fetch_one(Filter.empty(6), 10))

    def test_http_error_status_is_wrapped(self, run):
        service, _ = _service(lambda request: httpx.Response(503, text="busy"))

        with pytest.raises(DataServiceError, match="503"):
            run(service.fetch_batch(Filter(), 0, 10))

    def test_transport_error_is_wrapped(self, run):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service, _ = _service(handler)

        with pytest.raises(DataServiceError, match="connection refused"):
            run(service.fetch_one(Filter(), 0))

    def test_invalid_json_is_wrapped(self, run):
        service, _ = _service(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(DataServiceError, match="not valid JSON"):
            run(service.fetch_batch(Filter(), 0, 10))

    @pytest.mark.parametrize(
        "payload",
        [
            {"rows": [], "filteredCount": 0},
            {"rows": None, "filteredCount": 0, "totalCount": 0},
            {"rows": [], "filteredCount": "many", "totalCount": 0},
            ["not", "an", "object"],
        ],
    )
    def test_malformed_batch_payload(self, run, payload):
        service, _ = _service(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(DataServiceError):
            run(service.fetch_batch(Filter(), 0, 10))

    def test_malformed_entry_payload(self, run):
        service, _ = _service(lambda request: httpx.Response(200, json={"row": [1, 2]}))

        with pytest.raises(DataServiceError, match="Malformed entry"):
            run(service.fetch_one(Filter(), 0))

    def test_injected_client_stays_open(self, run):
        service, client = _service(_backend(make_people(1)))

        async def scenario():
            async with service:
                await service.fetch_one(Filter(), 0)

        run(scenario())
        assert not client.is_closed

    def test_owned_client_is_closed(self, run):
        service = HttpTableService(BASE_URL)

        run(service.aclose())

        assert service._client.is_closed

    def test_drives_a_controller(self, run):
        async def scenario():
            handler = _backend(make_people(100))
            service, client = _service(handler)
            controller, model, _ = build_table(service=service)

            controller.init()
            await controller.wait_idle()
            controller.update_scroll_index(60)
            await controller.wait_idle()
            await client.aclose()

            assert controller.current_data_set_size == 100
            assert model.rows.size() == 27 + 9
            assert controller.get_entry_value_by_index_and_key(60, 1) == "Person 61"
            assert sum(path.endswith("/entry") for path, _ in handler.requests) == 9

        run(scenario())
