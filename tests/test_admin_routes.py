from datetime import datetime, timedelta, timezone

from bson import ObjectId

from conftest import bearer


def _submit(client, token, fertilizer_id):
    res = client.post("/api/farmer/submit-order", json={"fertilizerId": fertilizer_id}, headers=bearer(token))
    assert res.status_code == 201
    return res.get_json()["order"]["id"]


# ---------------------------------------------------------
# metrics
# ---------------------------------------------------------
def test_metrics_with_no_orders(client, admin_token):
    res = client.get("/api/admin/metrics", headers=bearer(admin_token))
    assert res.status_code == 200
    assert res.get_json()["metrics"] == {
        "totalOrders": 0,
        "approvedOrders": 0,
        "declinedOrders": 0,
        "pendingOrders": 0,
        "weeklyOrders": 0,
        "approvalRate": "0.00",
        "declinedRate": "0.00",
        "pendingRate": "0.00",
    }


def test_metrics_rates(client, admin_token, farmer, add_fertilizer, db):
    fert = add_fertilizer()
    ids = [_submit(client, farmer["token"], fert["id"]) for _ in range(3)]

    client.post(f"/api/admin/approve-order/{ids[0]}", json={}, headers=bearer(admin_token))
    client.post(f"/api/admin/decline-order/{ids[1]}", json={"remarks": "no"}, headers=bearer(admin_token))

    # one order from long ago does not count towards the week
    old = (datetime.now(timezone.utc) - timedelta(days=30)).replace(tzinfo=None)
    db.orders.update_one({"_id": ObjectId(ids[2])}, {"$set": {"createdAt": old}})

    m = client.get("/api/admin/metrics", headers=bearer(admin_token)).get_json()["metrics"]
    assert m["totalOrders"] == 3
    assert m["approvedOrders"] == 1
    assert m["declinedOrders"] == 1
    assert m["pendingOrders"] == 1
    assert m["weeklyOrders"] == 2
    assert m["approvalRate"] == "33.33"
    assert m["declinedRate"] == "33.33"
    assert m["pendingRate"] == "33.33"


# ---------------------------------------------------------
# order listing
# ---------------------------------------------------------
def test_list_orders_paginates_and_filters(client, admin_token, farmer, add_fertilizer):
    fert = add_fertilizer()
    ids = [_submit(client, farmer["token"], fert["id"]) for _ in range(5)]
    client.post(f"/api/admin/approve-order/{ids[0]}", json={}, headers=bearer(admin_token))

    res = client.get("/api/admin/orders?page=2&limit=2", headers=bearer(admin_token))
    assert res.status_code == 200
    body = res.get_json()
    assert len(body["orders"]) == 2
    assert body["pagination"] == {"totalOrders": 5, "totalPages": 3, "currentPage": 2}
    assert body["orders"][0]["farmerPhone"] == "0788000111"
    assert body["orders"][0]["farmerName"] == "Jane Farmer"

    approved = client.get("/api/admin/orders?status=approved", headers=bearer(admin_token)).get_json()
    assert [o["id"] for o in approved["orders"]] == [ids[0]]
    assert approved["pagination"]["totalOrders"] == 1


def test_list_orders_rejects_unknown_status(client, admin_token):
    res = client.get("/api/admin/orders?status=shipped", headers=bearer(admin_token))
    assert res.status_code == 400


def test_list_orders_rejects_bad_paging(client, admin_token):
    assert client.get("/api/admin/orders?page=0", headers=bearer(admin_token)).status_code == 400
    assert client.get("/api/admin/orders?limit=abc", headers=bearer(admin_token)).status_code == 400


# ---------------------------------------------------------
# fertilizer catalog
# ---------------------------------------------------------
def test_add_fertilizer_defaults(add_fertilizer):
    fert = add_fertilizer(name="DAP", rate=25)
    assert fert["name"] == "DAP"
    assert fert["ratePerHectare"] == 25
    assert fert["unit"] == "kg"
    assert fert["description"] == ""
    assert fert["isActive"] is True


def test_add_fertilizer_duplicate_name(client, admin_token, add_fertilizer):
    add_fertilizer(name="NPK")
    res = client.post(
        "/api/admin/fertilizers",
        json={"name": "NPK", "ratePerHectare": 10},
        headers=bearer(admin_token),
    )
    assert res.status_code == 400
    assert res.get_json()["message"] == "Fertilizer already exists"


def test_add_fertilizer_validates_rate(client, admin_token):
    for body in ({"name": "X"}, {"name": "X", "ratePerHectare": 0}, {"name": "X", "ratePerHectare": -3}):
        res = client.post("/api/admin/fertilizers", json=body, headers=bearer(admin_token))
        assert res.status_code == 400


def test_update_fertilizer_missing(client, admin_token):
    res = client.put(f"/api/admin/fertilizers/{ObjectId()}", json={"isActive": False}, headers=bearer(admin_token))
    assert res.status_code == 404
    assert res.get_json()["message"] == "Fertilizer not found"


def test_update_fertilizer_rejects_non_positive_rate(client, admin_token, add_fertilizer):
    fert = add_fertilizer()
    res = client.put(f"/api/admin/fertilizers/{fert['id']}", json={"ratePerHectare": 0}, headers=bearer(admin_token))
    assert res.status_code == 400


def test_deactivated_fertilizer_hidden_from_farmers(client, admin_token, farmer, add_fertilizer, db):
    urea = add_fertilizer(name="Urea")
    add_fertilizer(name="DAP")

    res = client.put(
        f"/api/admin/fertilizers/{urea['id']}",
        json={"isActive": False, "description": "discontinued"},
        headers=bearer(admin_token),
    )
    assert res.status_code == 200
    assert res.get_json()["fertilizer"]["isActive"] is False

    listed = client.get("/api/farmer/fertilizers", headers=bearer(farmer["token"])).get_json()["fertilizers"]
    assert [f["name"] for f in listed] == ["DAP"]

    everything = client.get("/api/admin/fertilizers", headers=bearer(admin_token)).get_json()["fertilizers"]
    assert {f["name"] for f in everything} == {"Urea", "DAP"}

    doc = db.fertilizers.find_one({"name": "Urea"})
    assert doc["description"] == "discontinued"
    assert doc["updatedByAdmin"] is not None


def test_add_fertilizer_rejects_blank_name(client, admin_token, db):
    for name in ("", "   "):
        res = client.post(
            "/api/admin/fertilizers",
            json={"name": name, "ratePerHectare": 5},
            headers=bearer(admin_token),
        )
        assert res.status_code == 400
    assert db.fertilizers.count_documents({}) == 0


def test_add_fertilizer_strips_name(add_fertilizer):
    assert add_fertilizer(name="  CAN  ")["name"] == "CAN"


def test_fertilizer_rate_must_be_finite(client, admin_token, add_fertilizer):
    for rate in ("inf", "nan"):
        res = client.post(
            "/api/admin/fertilizers",
            json={"name": "Lime", "ratePerHectare": rate},
            headers=bearer(admin_token),
        )
        assert res.status_code == 400

    fert = add_fertilizer()
    res = client.put(f"/api/admin/fertilizers/{fert['id']}", json={"ratePerHectare": "inf"}, headers=bearer(admin_token))
    assert res.status_code == 400
