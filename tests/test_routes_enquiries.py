from test_enquiries import enquiry_payload, studio_payload


def test_create_requires_realtor_or_admin(client, vendor):
    assert client.post("/api/enquiries", json=enquiry_payload()).status_code == 401
    client.post("/api/auth/logout")
    assert client.post("/api/enquiries", json=enquiry_payload()).status_code == 401


def test_realtor_enquires_as_themselves(client, realtor):
    r = client.post("/api/enquiries", json=enquiry_payload(realtorId="someone-else", notes=None))
    assert r.status_code == 201
    rec = r.get_json()["enquiry"]
    assert rec["realtorId"] == realtor["id"]
    assert rec["realtorEmail"] == "agent@kwsingapore.com"
    assert rec["notes"] == "Interested in: photography, drone"

    listed = client.get("/api/enquiries").get_json()
    assert listed["count"] == 1 and listed["results"][0]["id"] == rec["id"]


def test_create_rejects_incomplete_form(client, realtor):
    r = client.post("/api/enquiries", json={"vendorId": "v1"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "invalid_enquiry"


def test_vendor_sees_and_updates_only_own(client, login, vendor):
    # realtor files one enquiry for this vendor and one for another
    login("agent@kwsingapore.com")
    own = client.post("/api/enquiries", json=enquiry_payload(vendorId=vendor["id"])).get_json()["enquiry"]
    other = client.post("/api/enquiries", json=enquiry_payload(vendorId="elsewhere")).get_json()["enquiry"]

    login("snap@studio.sg", "pw")
    rows = client.get("/api/enquiries").get_json()["results"]
    assert [r["id"] for r in rows] == [own["id"]]

    r = client.patch(f"/api/enquiries/{own['id']}", json={"status": "approved"})
    assert r.status_code == 200 and r.get_json()["enquiry"]["status"] == "approved"
    assert client.patch(f"/api/enquiries/{other['id']}", json={"status": "approved"}).status_code == 403
    assert client.patch("/api/enquiries/nope", json={"status": "approved"}).status_code == 404


def test_admin_lists_filters_and_rejects_bad_status(client, login, admin):
    login("agent@kwsingapore.com")
    a = client.post("/api/enquiries", json=enquiry_payload(vendorId="v1")).get_json()["enquiry"]
    client.post("/api/enquiries", json=enquiry_payload(vendorId="v2"))

    client.post("/api/auth/login", json={"email": "isabelle@chiefmedia.sg", "password": "admin123"})
    assert client.get("/api/enquiries").get_json()["count"] == 2
    assert client.get("/api/enquiries?vendorId=v1").get_json()["results"][0]["id"] == a["id"]

    assert client.patch(f"/api/enquiries/{a['id']}", json={"status": "archived"}).status_code == 400
    client.patch(f"/api/enquiries/{a['id']}", json={"status": "rejected"})
    assert client.get("/api/enquiries?status=rejected").get_json()["count"] == 1


def test_realtor_cannot_change_status(client, realtor):
    rec = client.post("/api/enquiries", json=enquiry_payload()).get_json()["enquiry"]
    assert client.patch(f"/api/enquiries/{rec['id']}", json={"status": "approved"}).status_code == 401


def test_public_studio_booking_and_admin_review(client, admin):
    client.post("/api/auth/logout")
    r = client.post("/api/studio-enquiries", json=studio_payload())
    assert r.status_code == 201
    rec = r.get_json()["enquiry"]
    assert r.get_json()["message"].endswith("North Studio")

    assert client.post("/api/studio-enquiries", json=studio_payload(realtorPhone="")).status_code == 400
    assert client.get("/api/studio-enquiries").status_code == 401

    client.post("/api/auth/login", json={"email": "isabelle@chiefmedia.sg", "password": "admin123"})
    assert client.get("/api/studio-enquiries", query_string={"studio": "North Studio"}).get_json()["count"] == 1
    r = client.patch(f"/api/studio-enquiries/{rec['id']}", json={"status": "approved"})
    assert r.get_json()["enquiry"]["status"] == "approved"
    assert client.patch("/api/studio-enquiries/missing", json={"status": "approved"}).status_code == 404


def test_realtor_sees_own_studio_bookings(client, realtor):
    client.post("/api/studio-enquiries", json=studio_payload(realtorEmail="agent@kwsingapore.com"))
    client.post("/api/studio-enquiries", json=studio_payload(realtorEmail="other@kwsingapore.com"))
    body = client.get("/api/studio-enquiries").get_json()
    assert body["count"] == 1
    assert body["results"][0]["realtorEmail"] == "agent@kwsingapore.com"


def test_non_string_status_is_rejected(client, login, admin):
    login("agent@kwsingapore.com")
    rec = client.post("/api/enquiries", json=enquiry_payload()).get_json()["enquiry"]
    client.post("/api/auth/logout")
    studio = client.post("/api/studio-enquiries", json=studio_payload()).get_json()["enquiry"]

    client.post("/api/auth/login", json={"email": "isabelle@chiefmedia.sg", "password": "admin123"})
    for status in (1, None, ["approved"], {"value": "approved"}):
        r = client.patch(f"/api/enquiries/{rec['id']}", json={"status": status})
        assert r.status_code == 400
        assert r.get_json()["error"] == "bad_status"
        r = client.patch(f"/api/studio-enquiries/{studio['id']}", json={"status": status})
        assert r.status_code == 400
    assert client.get("/api/enquiries").get_json()["results"][0]["status"] == "pending"
