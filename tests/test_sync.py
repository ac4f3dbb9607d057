from decimal import Decimal

import pytest
import requests

from records import PayRow, TripRow
from sheetbind.domain.models import MessageLevel
from sheetbind.exceptions import ConfigError, DataSourceError
from sheetbind.sync.provider import GoogleSheetsValuesProvider
from sheetbind.sync.service import SheetSync


class FakeResponse:
    def __init__(self, status_code: int, payload: dict | None = None):
        self.status_code = status_code
        self._payload = payload or {}

    def json(self):
        return self._payload


class FakeSession:
    """
    Replays canned responses (or raises canned exceptions) and records each request.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, params=None, json=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json})
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr("sheetbind.sync.provider.time.sleep", recorded.append)
    return recorded


def test_get_values(sleeps):
    session = FakeSession(FakeResponse(200, {"values": [["Date", "Pay"], ["2023-10-01", 10.5]]}))
    provider = GoogleSheetsValuesProvider(session=session)
    values = provider.get_values("sheet-id", "Trips!A1:B")
    assert values == [["Date", "Pay"], ["2023-10-01", 10.5]]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"].endswith("/spreadsheets/sheet-id/values/Trips!A1:B")
    assert call["params"]["valueRenderOption"] == "UNFORMATTED_VALUE"
    assert sleeps == []


def test_empty_range_returns_no_rows(sleeps):
    provider = GoogleSheetsValuesProvider(session=FakeSession(FakeResponse(200, {"range": "Trips!A1:Z"})))
    assert provider.get_values("sheet-id", "Trips") == []


def test_retryable_status_backs_off_then_succeeds(sleeps):
    session = FakeSession(FakeResponse(503), FakeResponse(429), FakeResponse(200, {"values": [["a"]]}))
    provider = GoogleSheetsValuesProvider(session=session, max_retries=3, backoff_seconds=0.5)
    assert provider.get_values("sheet-id", "Trips") == [["a"]]
    assert sleeps == [0.5, 1.0]
    assert len(session.calls) == 3


def test_network_errors_are_retried(sleeps):
    session = FakeSession(requests.ConnectionError("boom"), FakeResponse(200, {"values": []}))
    provider = GoogleSheetsValuesProvider(session=session, backoff_seconds=1.0)
    assert provider.get_values("sheet-id", "Trips") == []
    assert sleeps == [1.0]


def test_persistent_failure_raises(sleeps):
    session = FakeSession(FakeResponse(500), FakeResponse(500), FakeResponse(500))
    provider = GoogleSheetsValuesProvider(session=session, max_retries=3, backoff_seconds=1.0)
    with pytest.raises(DataSourceError, match="500"):
        provider.get_values("sheet-id", "Trips")
    assert sleeps == [1.0, 2.0]


def test_client_errors_are_not_retried(sleeps):
    session = FakeSession(FakeResponse(404))
    provider = GoogleSheetsValuesProvider(session=session)
    with pytest.raises(DataSourceError):
        provider.get_values("sheet-id", "Trips")
    assert len(session.calls) == 1
    assert sleeps == []


def test_missing_configuration():
    with pytest.raises(ConfigError):
        GoogleSheetsValuesProvider().get_values("sheet-id", "Trips")
    with pytest.raises(ConfigError):
        GoogleSheetsValuesProvider(session=FakeSession()).get_values("", "Trips")


def test_api_key_is_sent_as_query_parameter(monkeypatch):
    calls = []

    def fake_request(method, url, params=None, json=None):
        calls.append(params)
        return FakeResponse(200, {"values": [["x"]]})

    monkeypatch.setattr("sheetbind.sync.provider.requests.request", fake_request)
    provider = GoogleSheetsValuesProvider(api_key="secret")
    assert provider.get_values("sheet-id", "Trips") == [["x"]]
    assert calls[0]["key"] == "secret"


def test_api_key_cannot_write():
    with pytest.raises(ConfigError):
        GoogleSheetsValuesProvider(api_key="secret").update_values("sheet-id", "Trips!A2", [["x"]])


class FakeValuesProvider:
    def __init__(self, table):
        self.table = table
        self.updates = []
        self.appends = []

    def get_values(self, spreadsheet_id, range_a1):
        if range_a1.endswith("!1:1"):
            return self.table[:1]
        return self.table

    def update_values(self, spreadsheet_id, range_a1, rows):
        self.updates.append((range_a1, rows))
        return {}

    def append_values(self, spreadsheet_id, range_a1, rows):
        self.appends.append((range_a1, rows))
        return {}


def test_sheet_sync_load_reports_header_drift():
    provider = FakeValuesProvider([["Date", "Pay", "Mood"], ["2023-10-01", 5], ["2023-10-02", "7.25"]])
    result = SheetSync(provider, "sheet-id").load(PayRow, "Trips")
    assert result.ok
    assert [r.pay for r in result.records] == [Decimal("5"), Decimal("7.25")]
    assert [m.level for m in result.messages] == [MessageLevel.WARNING]
    assert result.to_dict()["records"][0]["row_id"] == 2


def test_sheet_sync_save_updates_known_rows_and_appends_new_ones():
    headers = ["Date", "Service", "#", "X", "Pickup", "Duration", "Pay", "Tips", "Total"]
    provider = FakeValuesProvider([headers, ["2023-10-01", "Uber", 1, False, "", "", 10, 0, "=G2+H2"]])
    sync = SheetSync(provider, "sheet-id")
    [existing] = sync.load(TripRow, "Trips").records
    fresh = TripRow(date="2023-10-03", service="Lyft", pay=Decimal("4.5"))

    counts = sync.save([existing, fresh], TripRow, "Trips")

    assert counts == {"updated": 1, "appended": 1}
    [(update_range, update_rows)] = provider.updates
    assert update_range == "Trips!A2:I2"
    assert update_rows[0][-1] is None
    [(append_range, append_rows)] = provider.appends
    assert append_range == "Trips!A:I"
    assert append_rows[0][:2] == ["2023-10-03", "Lyft"]
    assert append_rows[0][6] == "4.5"
