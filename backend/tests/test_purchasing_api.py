from datetime import date

import pytest


@pytest.fixture()
async def catalogue(client):
    creator = (await client.post("/users", json={"phone": "+919800000010", "name": "Kiran Mehta"})).json()
    vendor = (
        await client.post(
            "/vendors",
            json={
                "name": "Gujarat Building Supplies",
                "contact_person": "Mahesh Desai",
                "phone": "+919812345678",
                "address": "Naroda GIDC, Ahmedabad",
                "gst_number": "24aaacg1234f1z5",
                "material_groups": ["Civil"],
            },
        )
    ).json()
    cement = (
        await client.post("/materials", json={"code": "CEM-53", "name": "Cement", "unit": "bag", "material_group": "Civil"})
    ).json()
    steel = (
        await client.post("/materials", json={"code": "TMT-12", "name": "TMT Bar", "unit": "kg", "material_group": "Steel"})
    ).json()
    return {"creator": creator, "vendor": vendor, "cement": cement, "steel": steel}


def _order(catalogue, po_number="PO-0001", items=None):
    return {
        "po_number": po_number,
        "po_date": date(2026, 10, 18).isoformat(),
        "vendor_id": catalogue["vendor"]["id"],
        "created_by": catalogue["creator"]["id"],
        "items": items
        if items is not None
        else [
            {"material_id": catalogue["cement"]["id"], "quantity": 100, "rate": 385.5},
            {"material_id": catalogue["steel"]["id"], "quantity": 250, "rate": 62},
        ],
    }


async def test_vendor_gst_is_normalised_and_names_unique(client, catalogue):
    assert catalogue["vendor"]["gst_number"] == "24AAACG1234F1Z5"
    assert catalogue["vendor"]["material_groups"] == ["Civil"]

    dup = dict(
        name="gujarat building supplies",
        contact_person="X",
        phone="1",
        address="Y",
        gst_number="Z",
    )
    assert (await client.post("/vendors", json=dup)).status_code == 409


async def test_material_codes_are_unique(client, catalogue):
    resp = await client.post("/materials", json={"code": "CEM-53", "name": "Other", "unit": "bag", "material_group": "Civil"})
    assert resp.status_code == 409

    found = await client.get("/materials", params={"q": "steel"})
    assert [m["code"] for m in found.json()] == ["TMT-12"]


async def test_order_is_created_with_its_items_and_totals(client, catalogue):
    resp = await client.post("/purchase-orders", json=_order(catalogue))
    assert resp.status_code == 201
    po = resp.json()

    assert po["status"] == "draft"
    assert po["vendor"]["name"] == "Gujarat Building Supplies"
    assert [i["item_order"] for i in po["items"]] == [1, 2]
    assert [i["total"] for i in po["items"]] == [38550.0, 15500.0]
    assert po["total_amount"] == 54050.0
    assert po["items"][0]["material"]["code"] == "CEM-53"

    fetched = await client.get(f"/purchase-orders/{po['id']}")
    assert fetched.json()["total_amount"] == 54050.0


async def test_order_needs_items_and_a_unique_number(client, catalogue):
    assert (await client.post("/purchase-orders", json=_order(catalogue, items=[]))).status_code == 422

    assert (await client.post("/purchase-orders", json=_order(catalogue))).status_code == 201
    resp = await client.post("/purchase-orders", json=_order(catalogue))
    assert resp.status_code == 409

    assert len((await client.get("/purchase-orders")).json()) == 1


async def test_order_with_unknown_material_writes_nothing(client, catalogue):
    bad = _order(catalogue, items=[{"material_id": catalogue["vendor"]["id"], "quantity": 1, "rate": 1}])
    resp = await client.post("/purchase-orders", json=bad)
    assert resp.status_code == 404
    assert (await client.get("/purchase-orders")).json() == []


async def test_order_status_search_and_delete(client, catalogue):
    po = (await client.post("/purchase-orders", json=_order(catalogue))).json()

    resp = await client.patch(f"/purchase-orders/{po['id']}/status", json={"status": "sent"})
    assert resp.json()["status"] == "sent"
    assert len(resp.json()["items"]) == 2

    assert len((await client.get("/purchase-orders", params={"q": "gujarat"})).json()) == 1
    assert len((await client.get("/purchase-orders", params={"status": "draft"})).json()) == 0

    resp = await client.delete(f"/purchase-orders/{po['id']}")
    assert resp.json()["message"] == "Purchase order deleted successfully"
    assert (await client.get(f"/purchase-orders/{po['id']}")).status_code == 404


async def test_authorized_persons_crud(client):
    resp = await client.post("/authorized-persons", json={"name": "Kiran", "phone": "+91980", "position": "PM"})
    assert resp.status_code == 201
    person = resp.json()

    resp = await client.patch(f"/authorized-persons/{person['id']}", json={"is_active": False})
    assert resp.json()["is_active"] is False

    assert len((await client.get("/authorized-persons", params={"q": "pm"})).json()) == 1
    assert (await client.delete(f"/authorized-persons/{person['id']}")).status_code == 200
