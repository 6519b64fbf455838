"""Attendance upsert, filters and the date/prayer summary."""

import pytest
from httpx import AsyncClient

from app.api.v1.attendance.schemas import AttendanceFilter
from app.api.v1.attendance.service import filter_attendance, group_by_date_and_prayer
from app.db.document_store import DocumentStore


def _record(record_id: str, **overrides) -> dict:
    record = {
        "id": record_id,
        "studentId": "s1",
        "studentName": "Amina",
        "className": "Grade 5",
        "prayer": "fajr",
        "date": "2024-01-01",
        "status": "present",
    }
    record.update(overrides)
    return record


@pytest.mark.asyncio
async def test_upsert_attendance_defaults(client: AsyncClient, listener) -> None:
    response = await client.post("/api/v1/attendance", json=_record("a1"))
    assert response.status_code == 200
    data = response.json()
    assert data["reason"] is None
    assert data["timestamp"] == data["updatedAt"]
    assert listener.decoded()[0]["type"] == "attendance_updated"


@pytest.mark.asyncio
async def test_upsert_attendance_keeps_client_timestamp_and_reason(client: AsyncClient) -> None:
    payload = _record("a1", status="excused", reason="travel", timestamp="2024-01-01T05:00:00.000Z")
    data = (await client.post("/api/v1/attendance", json=payload)).json()
    assert data["reason"] == "travel"
    assert data["timestamp"] == "2024-01-01T05:00:00.000Z"


@pytest.mark.asyncio
async def test_upsert_attendance_missing_status_is_rejected(
    client: AsyncClient, document_store: DocumentStore, listener
) -> None:
    payload = _record("a1")
    del payload["status"]

    response = await client.post("/api/v1/attendance", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == (
        "id, studentId, studentName, className, prayer, date, and status are required"
    )
    assert (await document_store.load())["attendance"] == []
    assert listener.messages == []


@pytest.mark.asyncio
async def test_upsert_attendance_twice_keeps_one_record(client: AsyncClient, listener) -> None:
    await client.post("/api/v1/attendance", json=_record("a1", status="absent"))
    await client.post("/api/v1/attendance", json=_record("a1", status="present"))

    records = (await client.get("/api/v1/attendance")).json()
    assert [(r["id"], r["status"]) for r in records] == [("a1", "present")]
    assert [e["action"] for e in listener.decoded()] == ["created", "updated"]


@pytest.mark.asyncio
async def test_list_attendance_filters_combine(client: AsyncClient) -> None:
    await client.post("/api/v1/attendance", json=_record("a1"))
    await client.post("/api/v1/attendance", json=_record("a2", prayer="dhuhr"))
    await client.post("/api/v1/attendance", json=_record("a3", date="2024-01-02"))
    await client.post("/api/v1/attendance", json=_record("a4", studentId="s2", className="Grade 6"))

    async def ids(**params) -> list:
        response = await client.get("/api/v1/attendance", params=params)
        assert response.status_code == 200
        return [r["id"] for r in response.json()]

    assert await ids() == ["a1", "a2", "a3", "a4"]
    assert await ids(date="2024-01-01") == ["a1", "a2", "a4"]
    assert await ids(date="2024-01-01", prayer="fajr") == ["a1", "a4"]
    assert await ids(className="Grade 6") == ["a4"]
    assert await ids(studentId="s1", date="2024-01-02") == ["a3"]
    assert await ids(prayer="isha") == []


@pytest.mark.asyncio
async def test_delete_attendance_has_no_cascade(client: AsyncClient, document_store: DocumentStore, listener) -> None:
    await client.post("/api/v1/students", json={"id": "s1", "name": "Amina", "className": "Grade 5"})
    await client.post("/api/v1/attendance", json=_record("a1"))
    listener.messages.clear()

    response = await client.delete("/api/v1/attendance/a1")

    assert response.json() == {"success": True}
    document = await document_store.load()
    assert document["attendance"] == []
    assert len(document["students"]) == 1
    assert listener.decoded() == [{"type": "attendance_deleted", "data": {"id": "a1"}, "action": "deleted"}]


@pytest.mark.asyncio
async def test_summary_groups_by_date_then_prayer(client: AsyncClient, listener) -> None:
    await client.post("/api/v1/attendance", json=_record("rec1", date="2024-01-01", prayer="fajr"))
    await client.post("/api/v1/attendance", json=_record("rec2", date="2024-01-01", prayer="fajr", studentId="s2"))
    await client.post("/api/v1/attendance", json=_record("rec3", date="2024-01-02", prayer="dhuhr"))
    listener.messages.clear()

    response = await client.get("/api/v1/summary")

    assert response.status_code == 200
    summary = response.json()
    assert list(summary) == ["2024-01-01", "2024-01-02"]
    assert list(summary["2024-01-01"]) == ["fajr"]
    assert [r["id"] for r in summary["2024-01-01"]["fajr"]] == ["rec1", "rec2"]
    assert [r["id"] for r in summary["2024-01-02"]["dhuhr"]] == ["rec3"]
    assert listener.messages == []


@pytest.mark.asyncio
async def test_summary_applies_filters(client: AsyncClient) -> None:
    await client.post("/api/v1/attendance", json=_record("a1", className="Grade 5"))
    await client.post("/api/v1/attendance", json=_record("a2", className="Grade 6"))

    summary = (await client.get("/api/v1/summary", params={"className": "Grade 6"})).json()
    assert list(summary) == ["2024-01-01"]
    assert [r["id"] for r in summary["2024-01-01"]["fajr"]] == ["a2"]

    assert (await client.get("/api/v1/summary", params={"date": "2023-12-31"})).json() == {}


def test_group_by_date_and_prayer_keeps_first_appearance_order() -> None:
    records = [
        _record("r1", date="2024-01-02", prayer="maghrib"),
        _record("r2", date="2024-01-01", prayer="isha"),
        _record("r3", date="2024-01-02", prayer="asr"),
        _record("r4", date="2024-01-02", prayer="maghrib"),
    ]

    grouped = group_by_date_and_prayer(records)

    assert list(grouped) == ["2024-01-02", "2024-01-01"]
    assert list(grouped["2024-01-02"]) == ["maghrib", "asr"]
    assert [r["id"] for r in grouped["2024-01-02"]["maghrib"]] == ["r1", "r4"]


def test_filter_attendance_ignores_empty_values() -> None:
    records = [_record("r1"), _record("r2", prayer="asr")]

    assert filter_attendance(records, AttendanceFilter(prayer="", date=None)) == records
    assert filter_attendance(records, None) == records
    assert [r["id"] for r in filter_attendance(records, AttendanceFilter(prayer="asr"))] == ["r2"]
