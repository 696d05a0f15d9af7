from __future__ import annotations

from datetime import datetime

import pytest

from src.shift_payroll.shift_payroll.main import create_app

from tests.fakes import ALICE_ID, BOB_ID, PROVIDER_ID, STRANGER_ID


@pytest.fixture
def app(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=world.container)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def as_provider(client):
    login(client, PROVIDER_ID, "service_provider")


def as_worker(client, user_id=ALICE_ID):
    login(client, user_id, "support_worker")


def test_requires_session(client):
    resp = client.get("/api/shifts")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_role_is_enforced(client):
    as_worker(client)
    resp = client.post("/api/shifts", json={})
    assert resp.status_code == 403


def test_create_and_list_shifts(client):
    as_provider(client)
    resp = client.post(
        "/api/shifts",
        json={
            "support_worker_id": ALICE_ID,
            "title": "Morning support",
            "start_time": "2026-03-02T09:00:00",
            "end_time": "2026-03-02T17:00:00",
        },
    )
    assert resp.status_code == 201
    shift_id = resp.get_json()["shift_id"]

    listing = client.get("/api/shifts?week_start=2026-03-02").get_json()
    assert [s["shift_id"] for s in listing] == [shift_id]
    assert listing[0]["worker_name"] == "Alice Nguyen"

    as_worker(client)
    mine = client.get("/api/shifts").get_json()
    assert [s["shift_id"] for s in mine] == [shift_id]


def test_domain_errors_map_to_status_codes(client, world):
    shift = world.container.shift_service.create(
        provider_id=PROVIDER_ID,
        worker_id=ALICE_ID,
        title="Support",
        start_time=datetime(2026, 3, 2, 9),
        end_time=datetime(2026, 3, 2, 17),
    )

    as_provider(client)
    bad = client.post("/api/shifts", json={"support_worker_id": ALICE_ID, "title": ""})
    assert bad.status_code == 400
    assert bad.get_json()["error"] == "validation_error"

    missing = client.get("/api/shifts/999")
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "not_found"

    as_worker(client, STRANGER_ID)
    forbidden = client.post("/api/timesheets/clock-in", json={"shift_id": shift.shift_id})
    assert forbidden.status_code == 403
    assert forbidden.get_json()["error"] == "authorization_error"


def test_timesheet_flow_over_http(client, world):
    shift = world.container.shift_service.create(
        provider_id=PROVIDER_ID,
        worker_id=ALICE_ID,
        title="Support",
        start_time=datetime(2026, 3, 2, 9),
        end_time=datetime(2026, 3, 2, 17),
    )

    as_worker(client)
    ts = client.post(
        "/api/timesheets/clock-in", json={"shift_id": shift.shift_id, "start_time": "2026-03-02T09:00:00"}
    ).get_json()
    out = client.post(
        f"/api/timesheets/{ts['timesheet_id']}/clock-out",
        json={"end_time": "2026-03-02T17:00:00", "break_minutes": 30},
    )
    assert out.status_code == 200
    assert out.get_json()["total_hours"] == "7.50"
    assert client.post(f"/api/timesheets/{ts['timesheet_id']}/submit").status_code == 200

    as_provider(client)
    assert client.post(f"/api/timesheets/{ts['timesheet_id']}/approve").get_json()["status"] == "approved"

    again = client.post(f"/api/timesheets/{ts['timesheet_id']}/approve")
    assert again.status_code == 409
    assert again.get_json()["error"] == "state_conflict"


def test_generate_and_pay_payslip(client, world):
    world.approved_timesheet(shift_id=1, worker_id=ALICE_ID, start=datetime(2026, 3, 2, 9), hours="8.00")
    world.approved_timesheet(shift_id=2, worker_id=ALICE_ID, start=datetime(2026, 3, 3, 9), hours="8.00")
    world.approved_timesheet(shift_id=3, worker_id=ALICE_ID, start=datetime(2026, 3, 4, 9), hours="4.00")

    as_provider(client)
    resp = client.post(
        "/api/payslips/generate",
        json={
            "support_worker_id": ALICE_ID,
            "pay_period_start": "2026-03-01",
            "pay_period_end": "2026-03-31",
            "hourly_rate": "30.00",
            "deductions": "20.00",
        },
    )
    assert resp.status_code == 201
    payslip = resp.get_json()
    assert payslip["gross_pay"] == "600.00"
    assert payslip["net_pay"] == "580.00"

    detail = client.get(f"/api/payslips/{payslip['payslip_id']}").get_json()
    assert len(detail["items"]) == 2
    assert detail["worker_name"] == "Alice Nguyen"

    assert client.post(f"/api/payslips/{payslip['payslip_id']}/issue").status_code == 200
    assert client.post(f"/api/payslips/{payslip['payslip_id']}/mark-paid").get_json()["status"] == "paid"
    assert client.post(f"/api/payslips/{payslip['payslip_id']}/mark-paid").status_code == 409

    summary = client.get(f"/api/payslips/summary/{ALICE_ID}").get_json()
    assert summary["total_paid"] == "580.00"

    as_worker(client, BOB_ID)
    assert client.get(f"/api/payslips/{payslip['payslip_id']}").status_code == 403


def test_bad_period_date_is_rejected(client):
    as_provider(client)
    resp = client.post(
        "/api/payslips/generate",
        json={
            "support_worker_id": ALICE_ID,
            "pay_period_start": "03/01/2026",
            "pay_period_end": "2026-03-31",
            "hourly_rate": "30",
        },
    )
    assert resp.status_code == 400


def test_report_csv_and_pdf(client, world):
    world.container.shift_service.create(
        provider_id=PROVIDER_ID,
        worker_id=ALICE_ID,
        title="Support",
        start_time=datetime(2026, 3, 10, 9),
        end_time=datetime(2026, 3, 10, 17),
    )

    as_provider(client)
    preview = client.get("/api/reports/shifts?start_date=2026-03-01&end_date=2026-03-31").get_json()
    assert preview["summary"]["total_shifts"] == 1

    resp = client.get("/api/reports/shifts.csv?start_date=2026-03-01&end_date=2026-03-31")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "shift_report_20260301_20260331.csv" in resp.headers["Content-Disposition"]
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0].startswith("worker_name,client_name,shift_date")
    assert lines[1].startswith("Alice Nguyen,N/A,\"Mar 10, 2026\",9:00 AM,5:00 PM,N/A,N/A,0,0.00")

    pdf = client.get("/api/reports/shifts.pdf")
    assert pdf.status_code == 501


def test_relationships_listing(client):
    as_provider(client)
    rows = client.get("/api/relationships").get_json()
    assert [(r["support_worker_id"], r["status"]) for r in rows] == [(ALICE_ID, "active"), (BOB_ID, "inactive")]


@pytest.mark.parametrize(
    "role, path, body",
    [
        (
            "service_provider",
            "/api/payslips/generate",
            {
                "support_worker_id": "abc",
                "pay_period_start": "2026-03-01",
                "pay_period_end": "2026-03-31",
                "hourly_rate": "30",
            },
        ),
        ("support_worker", "/api/timesheets/clock-in", {"shift_id": "x1"}),
        (
            "service_provider",
            "/api/shifts",
            {
                "support_worker_id": "two",
                "title": "Support",
                "start_time": "2026-03-02T09:00:00",
                "end_time": "2026-03-02T17:00:00",
            },
        ),
        ("service_provider", "/api/shifts/1/assignments", {"support_worker_id": "1.5"}),
        ("service_provider", "/api/relationships", {"support_worker_id": ["2"]}),
    ],
)
def test_malformed_ids_are_validation_errors(client, role, path, body):
    login(client, PROVIDER_ID if role == "service_provider" else ALICE_ID, role)

    resp = client.post(path, json=body)

    assert resp.status_code == 400
    data = resp.get_json()
    assert data["error"] == "validation_error"
    assert "integer id" in data["message"]


def test_assignment_patch_must_match_shift_in_path(client, world):
    svc = world.container.shift_service
    first = svc.create(
        provider_id=PROVIDER_ID,
        worker_id=ALICE_ID,
        title="Support",
        start_time=datetime(2026, 3, 2, 9),
        end_time=datetime(2026, 3, 2, 17),
    )
    second = svc.create(
        provider_id=PROVIDER_ID,
        worker_id=ALICE_ID,
        title="Support",
        start_time=datetime(2026, 3, 3, 9),
        end_time=datetime(2026, 3, 3, 17),
    )
    assignment = svc.assign(shift_id=first.shift_id, provider_id=PROVIDER_ID, worker_id=ALICE_ID)

    as_worker(client)
    wrong = client.patch(
        f"/api/shifts/{second.shift_id}/assignments/{assignment.assignment_id}", json={"status": "accepted"}
    )
    assert wrong.status_code == 404

    right = client.patch(
        f"/api/shifts/{first.shift_id}/assignments/{assignment.assignment_id}", json={"status": "accepted"}
    )
    assert right.status_code == 200
    assert right.get_json()["status"] == "accepted"
