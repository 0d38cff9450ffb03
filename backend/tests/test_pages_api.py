import uuid
from datetime import datetime, timedelta, timezone

from db.database import Activity, Booking, ConversationSession, EmployeeOtp, MessageLog


async def _user(client, phone, name, role="employee"):
    resp = await client.post("/users", json={"phone": phone, "name": name, "role": role})
    assert resp.status_code == 201
    return resp.json()


async def _site(client, name="Shivalik Tower"):
    resp = await client.post("/sites", json={"name": name})
    assert resp.status_code == 201
    return resp.json()


async def test_users_crud_and_search(client):
    ramesh = await _user(client, "+919800000001", "Ramesh Patel", "supervisor")
    await _user(client, "+919800000002", "Suresh Kumar")

    resp = await client.get("/users", params={"q": "patel"})
    assert [u["name"] for u in resp.json()] == ["Ramesh Patel"]

    resp = await client.get("/users", params={"q": "SUPERVISOR"})
    assert [u["id"] for u in resp.json()] == [ramesh["id"]]

    resp = await client.patch(f"/users/{ramesh['id']}", json={"name": "Ramesh P."})
    assert resp.json()["name"] == "Ramesh P."
    assert resp.json()["phone"] == "+919800000001"

    resp = await client.delete(f"/users/{ramesh['id']}")
    assert resp.json()["message"] == "User deleted successfully"
    assert (await client.get(f"/users/{ramesh['id']}")).status_code == 404


async def test_blank_required_fields_are_rejected(client):
    assert (await client.post("/users", json={"phone": "  "})).status_code == 422
    assert (await client.post("/sites", json={"name": ""})).status_code == 422
    assert (await client.post("/sites", json={"name": "X", "status": "paused"})).status_code == 422


async def test_sites_resolve_image_urls(client):
    resp = await client.post("/sites", json={"name": "Tower", "image_key": "sites/tower.jpg"})
    assert resp.json()["image_url"].endswith("/sites/tower.jpg")

    resp = await client.get("/sites", params={"q": "tow"})
    assert len(resp.json()) == 1


async def test_unknown_ids_are_404(client):
    missing = uuid.uuid4()
    assert (await client.get(f"/sites/{missing}")).json()["detail"] == "Site not found"
    assert (await client.delete(f"/vendors/{missing}")).status_code == 404
    assert (await client.patch(f"/bookings/{missing}/status", json={"status": "confirmed"})).status_code == 404


async def test_duplicate_assignment_is_a_conflict(client):
    user = await _user(client, "+919800000003", "Anil Shah")
    site = await _site(client)

    resp = await client.post("/user-site-assignments", json={"user_id": user["id"], "site_id": site["id"]})
    assert resp.status_code == 201
    assignment = resp.json()
    assert assignment["user"]["name"] == "Anil Shah"
    assert assignment["site"]["name"] == "Shivalik Tower"

    resp = await client.post("/user-site-assignments", json={"user_id": user["id"], "site_id": site["id"]})
    assert resp.status_code == 409

    resp = await client.get("/user-site-assignments", params={"q": "anil"})
    assert len(resp.json()) == 1

    resp = await client.patch(f"/user-site-assignments/{assignment['id']}", json={"status": "suspended"})
    assert resp.json()["status"] == "suspended"


async def test_activities_are_joined_and_formatted(client, db_session):
    user = await _user(client, "+919800000004", "Mahesh")
    site = await _site(client)
    db_session.add(
        Activity(
            user_id=uuid.UUID(user["id"]),
            site_id=uuid.UUID(site["id"]),
            activity_type="work",
            description="Plastering level 3",
            hours=6,
            created_at=datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc),
        )
    )
    await db_session.commit()

    rows = (await client.get("/activities", params={"q": "mahesh"})).json()
    assert len(rows) == 1
    assert rows[0]["user"]["name"] == "Mahesh"
    assert rows[0]["site"]["name"] == "Shivalik Tower"
    assert rows[0]["created_at_display"] == "18 Oct 2026, 02:30 pm"

    resp = await client.patch(f"/activities/{rows[0]['id']}", json={"hours": 7.5})
    assert resp.json()["hours"] == 7.5
    assert (await client.patch(f"/activities/{rows[0]['id']}", json={"hours": -1})).status_code == 422


async def test_bot_pages(client, db_session):
    now = datetime.now(timezone.utc)
    db_session.add_all(
        [
            Booking(customer_name="Priya", customer_phone="+919700000001"),
            MessageLog(phone="+919700000001", direction="inbound", message_type="text", content="hello", meta={"wa": 1}),
            MessageLog(phone="+919700000002", direction="outbound", message_type="text", content="welcome"),
            ConversationSession(phone="+919700000001", intent="booking", step="pick_slot", data={}),
            EmployeeOtp(phone="+919800000001", otp_hash="h1", attempts=0, expires_at=now + timedelta(minutes=5)),
            EmployeeOtp(phone="+919800000002", otp_hash="h2", attempts=3, expires_at=now - timedelta(minutes=5)),
        ]
    )
    await db_session.commit()

    bookings = (await client.get("/bookings")).json()
    resp = await client.patch(f"/bookings/{bookings[0]['id']}/status", json={"status": "confirmed"})
    assert resp.json()["status"] == "confirmed"
    assert (await client.patch(f"/bookings/{bookings[0]['id']}/status", json={"status": "maybe"})).status_code == 422

    logs = (await client.get("/message-logs", params={"direction": "inbound"})).json()
    assert [m["content"] for m in logs] == ["hello"]
    assert logs[0]["metadata"] == {"wa": 1}

    sessions = (await client.get("/sessions", params={"q": "slot"})).json()
    assert [s["phone"] for s in sessions] == ["+919700000001"]
    assert (await client.delete("/sessions/+919700000001")).status_code == 200
    assert (await client.get("/sessions")).json() == []

    otps = {o["phone"]: o for o in (await client.get("/employee-otps")).json()}
    assert otps["+919800000001"]["is_expired"] is False
    assert otps["+919800000002"]["is_expired"] is True
    assert all("otp_hash" not in o for o in otps.values())


async def test_dashboard_counts(client):
    await _user(client, "+919800000005", "Kiran")
    await _site(client)
    resp = await client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["users"] == 1
    assert body["sites"] == 1
    assert body["active_sites"] == 1


async def test_unknown_page(client):
    resp = await client.get("/no/such/page")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Page not found", "path": "/no/such/page"}


async def test_wrong_method_on_a_page_is_not_a_missing_page(client):
    user = await _user(client, "+919800000010", "Dinesh")

    resp = await client.put(f"/users/{user['id']}", json={"name": "Dinesh M."})
    assert resp.status_code == 405

    resp = await client.get("/users/")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Page not found", "path": "/users/"}


async def test_pages_require_sign_in(anon_client):
    for path in ("/", "/users", "/inventory/items", "/purchase-orders", "/no/such/page"):
        resp = await anon_client.get(path)
        assert resp.status_code == 401, path


async def test_requests_inquiries_and_invoices(client, db_session):
    from db.database import CustomerInquiry, Invoice, MaterialRequest

    user = await _user(client, "+919800000006", "Jignesh")
    site = await _site(client, "Riverfront Villas")
    db_session.add_all(
        [
            MaterialRequest(
                user_id=uuid.UUID(user["id"]),
                site_id=uuid.UUID(site["id"]),
                material_name="River sand",
                quantity=4,
                unit="ton",
                urgency="high",
            ),
            CustomerInquiry(phone="+919700000009", full_name="Neha Joshi", email="neha@example.com"),
            Invoice(
                company_name="Ambuja Cement",
                invoice_description="200 bags OPC",
                invoice_date=datetime(2026, 10, 1).date(),
                amount=77000,
                site_id=uuid.UUID(site["id"]),
            ),
        ]
    )
    await db_session.commit()

    pending = (await client.get("/material-requests", params={"q": "riverfront"})).json()
    assert pending[0]["status"] == "pending"
    assert pending[0]["user"]["name"] == "Jignesh"
    resp = await client.patch(f"/material-requests/{pending[0]['id']}/status", json={"status": "approved"})
    assert resp.json()["status"] == "approved"
    resp = await client.patch(f"/material-requests/{pending[0]['id']}", json={"quantity": 5})
    assert resp.json()["quantity"] == 5
    assert resp.json()["status"] == "approved"

    inquiries = (await client.get("/customer-inquiries", params={"q": "NEHA"})).json()
    assert inquiries[0]["status"] == "new"
    resp = await client.patch(f"/customer-inquiries/{inquiries[0]['id']}/status", json={"status": "contacted"})
    assert resp.json()["status"] == "contacted"

    invoices = (await client.get("/invoices", params={"q": "ambuja"})).json()
    assert invoices[0]["currency"] == "INR"
    assert invoices[0]["site"]["name"] == "Riverfront Villas"
    resp = await client.patch(f"/invoices/{invoices[0]['id']}/status", json={"status": "paid"})
    assert resp.json()["status"] == "paid"
    assert (await client.delete(f"/invoices/{invoices[0]['id']}")).json()["message"] == "Invoice deleted successfully"
