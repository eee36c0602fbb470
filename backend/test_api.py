"""
API tests using FastAPI's TestClient

Run with: pytest backend/test_api.py -v
"""
import io

import pytest
from openpyxl import load_workbook
from starlette.websockets import WebSocketDisconnect


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "db_available": True}


class TestRosters:

    def test_list(self, client):
        data = client.get("/api/rosters").json()
        assert data["default_roster"] == "84"
        names = [r["name"] for r in data["rosters"]]
        assert names == ["84", "42", "14", "8"]
        first = data["rosters"][0]
        assert first["length"] == 84
        assert first["base_date"] == "2026-01-01"
        assert first["shifts"] == ["A", "B", "C", "D"]


class TestShiftAt:

    def test_morning(self, client):
        response = client.get("/api/shift/at", params={"timestamp": "2026-01-01T08:00:00", "roster": "84"})
        assert response.status_code == 200
        data = response.json()
        assert data["active_period"] == "morning"
        assert data["active_label"] == "07–15"
        assert data["active_shift"] == "A"
        assert data["cycle_index"] == 0

    def test_night_tail_uses_previous_day(self, client):
        data = client.get("/api/shift/at", params={"timestamp": "2026-01-01T02:00:00"}).json()
        assert data["roster"] == "84"
        assert data["active_period"] == "night"
        assert data["attributed_date"] == "2025-12-31"
        assert data["cycle_offset"] == -1
        assert data["cycle_index"] == 83
        assert data["active_shift"] == data["day_entry"]["night"]

    def test_aware_timestamp_is_converted(self, client):
        # 10:00 UTC is 07:00 in Sao Paulo
        data = client.get("/api/shift/at", params={"timestamp": "2026-01-01T10:00:00Z"}).json()
        assert data["timestamp"] == "2026-01-01T07:00:00"
        assert data["active_period"] == "morning"

    def test_bare_date_is_noon(self, client):
        data = client.get("/api/shift/at", params={"timestamp": "2026-01-01"}).json()
        assert data["timestamp"] == "2026-01-01T12:00:00"

    def test_bad_timestamp(self, client):
        response = client.get("/api/shift/at", params={"timestamp": "tomorrow"})
        assert response.status_code == 400

    @pytest.mark.parametrize("timestamp", ["0001-01-01T01:00:00Z", "0001-01-01T02:00:00"])
    def test_before_first_representable_night(self, client, timestamp):
        response = client.get("/api/shift/at", params={"timestamp": timestamp})
        assert response.status_code == 400

    def test_unknown_roster(self, client):
        response = client.get("/api/shift/at", params={"timestamp": "2026-01-01T08:00", "roster": "7"})
        assert response.status_code == 404
        assert "Unknown roster" in response.json()["detail"]


def test_current_shift(client):
    data = client.get("/api/shift/current", params={"roster": "42"}).json()
    assert data["roster"] == "42"
    assert data["active_period"] in ("morning", "afternoon", "night")
    assert data["active_shift"] == data["day_entry"][data["active_period"]]


class TestDayAndMonth:

    def test_day_table(self, client):
        data = client.get("/api/shift/day", params={"date": "2026-01-08", "roster": "84"}).json()
        assert data["day_of_week"] == "Thu"
        assert data["cycle_index"] == 7
        assert data["periods"] == {"morning": "D", "afternoon": "C", "night": "B"}
        assert data["assignments"] == {"A": "resting", "B": "23–07", "C": "15–23", "D": "07–15"}

    def test_day_table_switches_rosters(self, client):
        day_84 = client.get("/api/shift/day", params={"date": "2026-01-01", "roster": "84"}).json()
        day_42 = client.get("/api/shift/day", params={"date": "2026-01-01", "roster": "42"}).json()
        assert day_84["assignments"]["A"] == "07–15"
        assert day_42["assignments"]["F"] == "07–15"
        assert day_42["assignments"]["A"] == "resting"

    def test_bad_date(self, client):
        response = client.get("/api/shift/day", params={"date": "2026-02-30"})
        assert response.status_code == 400

    def test_missing_date(self, client):
        response = client.get("/api/shift/day")
        assert response.status_code == 422

    def test_month(self, client):
        data = client.get("/api/shift/month", params={"month": "2026-02", "roster": "14"}).json()
        assert data["month"] == "2026-02"
        assert len(data["days"]) == 28
        assert data["days"][0]["date"] == "2026-02-01"

    def test_bad_month(self, client):
        response = client.get("/api/shift/month", params={"month": "2026-13"})
        assert response.status_code == 400

    @pytest.mark.parametrize("month", ["0000-01", "10000-01"])
    def test_month_year_out_of_range(self, client, month):
        response = client.get("/api/shift/month", params={"month": month})
        assert response.status_code == 400


class TestExport:

    def test_export_workbook(self, client):
        response = client.get("/api/export", params={"month": "2026-01", "roster": "84"})
        assert response.status_code == 200
        assert "rota_2026-01_84.xlsx" in response.headers["content-disposition"]

        wb = load_workbook(io.BytesIO(response.content))
        ws = wb.worksheets[0]
        assert [c.value for c in ws[1]] == ["Date", "Day", "Crew A", "Crew B", "Crew C", "Crew D"]
        assert ws.max_row == 32
        # 2026-01-08 is cycle index 7, crew A rests
        assert ws.cell(row=9, column=1).value == "2026-01-08"
        assert ws.cell(row=9, column=3).value == "resting"

        summary = wb["Summary"]
        assert summary.cell(row=1, column=1).value == "Crew"
        for row in range(2, 6):
            values = [summary.cell(row=row, column=col).value for col in range(2, 6)]
            assert sum(values) == 31

    @pytest.mark.parametrize("month", ["0000-01", "10000-01"])
    def test_export_year_out_of_range(self, client, month):
        response = client.get("/api/export", params={"month": month})
        assert response.status_code == 400

    def test_export_unknown_roster(self, client):
        response = client.get("/api/export", params={"month": "2026-01", "roster": "nope"})
        assert response.status_code == 404


class TestLiveFeed:

    def test_pushes_resolution(self, client):
        with client.websocket_connect("/api/shift/live?roster=14") as ws:
            data = ws.receive_json()
            assert data["roster"] == "14"
            assert data["active_period"] in ("morning", "afternoon", "night")

    def test_switch_roster(self, client):
        with client.websocket_connect("/api/shift/live") as ws:
            assert ws.receive_json()["roster"] == "84"
            ws.send_text("nope")
            data = ws.receive_json()
            while "error" not in data:
                data = ws.receive_json()
            assert "Unknown roster" in data["error"]
            ws.send_text("8")
            data = ws.receive_json()
            while "error" in data or data["roster"] != "8":
                data = ws.receive_json()
            assert data["roster"] == "8"

    def test_binary_frame_is_answered_with_an_error(self, client):
        with client.websocket_connect("/api/shift/live") as ws:
            assert ws.receive_json()["roster"] == "84"
            ws.send_bytes(b"8")
            data = ws.receive_json()
            while "error" not in data:
                data = ws.receive_json()
            assert "text message" in data["error"]

            ws.send_text("8")
            data = ws.receive_json()
            while "error" in data or data["roster"] != "8":
                data = ws.receive_json()
            assert data["roster"] == "8"

    def test_unknown_roster_is_refused(self, client):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/api/shift/live?roster=nope") as ws:
                ws.receive_json()


class TestThemePreference:

    def test_round_trip(self, client):
        response = client.put("/api/preferences/theme", json={"theme": "dark"})
        assert response.status_code == 200
        assert response.json() == {"theme": "dark"}
        assert client.get("/api/preferences/theme").json() == {"theme": "dark"}

        client.put("/api/preferences/theme", json={"theme": "light"})
        assert client.get("/api/preferences/theme").json() == {"theme": "light"}

    def test_invalid_theme(self, client):
        response = client.put("/api/preferences/theme", json={"theme": "sepia"})
        assert response.status_code == 422
