from unittest.mock import patch, MagicMock

import pytest

from strapi_api import StrapiError

PROTECTED = ["/dashboard", "/admin", "/admin/enquiries", "/admin/studio-enquiries",
             "/enquiries", "/vendor/dashboard", "/vendors"]


@pytest.mark.parametrize("path", PROTECTED)
def test_anonymous_is_sent_to_login(client, path):
    r = client.get(path)
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/login")


@pytest.mark.parametrize("path", ["/admin", "/admin/enquiries", "/vendor/dashboard"])
def test_wrong_role_is_sent_to_login(client, realtor, path):
    r = client.get(path)
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/login")


def test_admin_overview_counts(client, login, admin):
    login("agent@kwsingapore.com")
    client.post("/api/enquiries", json={
        "vendorId": "v1", "vendorName": "Tubear", "offerings": ["photo"],
    })
    client.post("/api/auth/login", json={"email": "isabelle@chiefmedia.sg", "password": "admin123"})
    body = client.get("/admin").get_json()
    assert body["enquiries"]["pending"] == 1
    assert body["studio_enquiries"] == {"pending": 0, "approved": 0, "rejected": 0, "completed": 0}


def test_realtor_enquiries_page(client, realtor):
    client.post("/api/enquiries", json={"vendorId": "v1", "vendorName": "Tubear", "offerings": []})
    body = client.get("/enquiries").get_json()
    assert len(body["enquiries"]) == 1
    assert body["enquiries"][0]["realtorId"] == realtor["id"]


def test_dashboard_accepts_any_user(client, login):
    login("someone@gmail.com")
    assert client.get("/dashboard").get_json()["user"]["role"] == "client"


def test_login_page_redirects_signed_in_user(client, admin):
    r = client.get("/login")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/admin")
    client.post("/api/auth/logout")
    assert client.get("/login").get_json()["page"] == "login"


def test_vendors_page_lists_active_vendors(client, realtor):
    fake = MagicMock()
    fake.get_vendors.return_value = [{"id": 7, "name": "Tubear", "status": "active", "services": ["photo"]}]
    with patch("routes_pages.get_client", return_value=fake):
        body = client.get("/vendors").get_json()
    fake.get_vendors.assert_called_once_with(status="active")
    assert body["vendors"][0]["id"] == "7"


def test_vendors_page_content_api_down(client, realtor):
    fake = MagicMock()
    fake.get_vendors.side_effect = StrapiError("boom")
    with patch("routes_pages.get_client", return_value=fake):
        r = client.get("/vendors")
    assert r.status_code == 502
    assert r.get_json()["retry"] == "/vendors"


def test_health(client):
    assert client.get("/health").get_json()["ok"] is True


def test_admin_enquiry_pages_list_every_record(client, login, admin):
    login("agent@kwsingapore.com")
    client.post("/api/enquiries", json={"vendorId": "v1", "vendorName": "Tubear", "offerings": ["photo"]})
    client.post("/api/enquiries", json={"vendorId": "v2", "vendorName": "Lumen", "offerings": ["video"]})
    client.post("/api/studio-enquiries", json={
        "studioName": "North Studio", "studioAddress": "5 AMK", "realtorName": "Agent",
        "realtorEmail": "agent@kwsingapore.com", "realtorPhone": "+65 9000 0000",
        "selectedDate": "2025-03-01", "selectedTime": "10:00",
    })
    client.post("/api/auth/login", json={"email": "isabelle@chiefmedia.sg", "password": "admin123"})

    body = client.get("/admin/enquiries").get_json()
    assert body["page"] == "admin/enquiries"
    assert [e["vendorName"] for e in body["enquiries"]] == ["Tubear", "Lumen"]

    body = client.get("/admin/studio-enquiries").get_json()
    assert body["page"] == "admin/studio-enquiries"
    assert len(body["enquiries"]) == 1
    assert body["enquiries"][0]["studioName"] == "North Studio"
    assert body["enquiries"][0]["status"] == "pending"
