import copy
import json

import pytest

from enquiries import EnquiryStore, EnquiryValidationError
from storage import get_storage
from studio_enquiries import StudioEnquiryStore


def enquiry_payload(**overrides):
    data = {
        "vendorId": "v1",
        "vendorName": "Tubear",
        "realtorId": "r1",
        "realtorName": "Ann",
        "realtorEmail": "ann@kwsingapore.com",
        "offerings": ["photography", "drone"],
    }
    data.update(overrides)
    return data


def studio_payload(**overrides):
    data = {
        "studioName": "North Studio",
        "studioAddress": "5 Ang Mo Kio Industrial Park 2A",
        "realtorName": "Ann",
        "realtorEmail": "ann@kwsingapore.com",
        "realtorPhone": "+65 9123 4567",
        "selectedDate": "2025-03-01",
        "selectedTime": "10:00",
    }
    data.update(overrides)
    return data


def test_added_enquiry_is_found_by_realtor(app):
    with app.test_request_context():
        store = EnquiryStore()
        mine = store.add_enquiry(enquiry_payload())
        store.add_enquiry(enquiry_payload(realtorId="r2"))

        assert store.get_enquiries_by_realtor("r1") == [mine]
        assert mine["status"] == "pending"
        assert mine["createdAt"].endswith("Z")
        # a fresh store reads what was persisted
        assert EnquiryStore().get_enquiries_by_realtor("r1") == [mine]


def test_status_update_touches_only_target(app):
    with app.test_request_context():
        store = EnquiryStore()
        a = store.add_enquiry(enquiry_payload())
        store.add_enquiry(enquiry_payload(vendorId="v2", notes="call me"))
        before = copy.deepcopy(store.enquiries)

        updated = store.update_enquiry_status(a["id"], "approved")

        assert updated == {**a, "status": "approved"}
        after = EnquiryStore().enquiries
        assert after[0] == {**before[0], "status": "approved"}
        assert after[1] == before[1]


def test_any_status_transition_is_accepted(app):
    with app.test_request_context():
        store = EnquiryStore()
        rec = store.add_enquiry(enquiry_payload(status="completed"))
        assert store.update_enquiry_status(rec["id"], "pending")["status"] == "pending"


def test_unknown_id_and_bad_status(app):
    with app.test_request_context():
        store = EnquiryStore()
        rec = store.add_enquiry(enquiry_payload())
        assert store.update_enquiry_status("missing", "approved") is None
        with pytest.raises(EnquiryValidationError):
            store.update_enquiry_status(rec["id"], "archived")
        assert EnquiryStore().enquiries == [rec]


def test_ids_are_unique_within_a_millisecond(app):
    with app.test_request_context():
        store = EnquiryStore()
        ids = {store.add_enquiry(enquiry_payload())["id"] for _ in range(5)}
        assert len(ids) == 5


def test_invalid_payload_is_rejected(app):
    with app.test_request_context():
        store = EnquiryStore()
        with pytest.raises(EnquiryValidationError) as exc:
            store.add_enquiry({"vendorId": "v1"})
        assert exc.value.details
        assert store.enquiries == []


def test_corrupt_storage_starts_empty(app):
    with open(app.config["STORAGE_PATH"], "w", encoding="utf-8") as f:
        json.dump({"enquiries": "{not json", "studio-enquiries": "[]"}, f)
    with app.test_request_context():
        assert EnquiryStore().enquiries == []
        assert get_storage().get_item("enquiries") is None
        assert get_storage().get_item("studio-enquiries") == "[]"


def test_vendor_filter(app):
    with app.test_request_context():
        store = EnquiryStore()
        store.add_enquiry(enquiry_payload(vendorId="v1"))
        store.add_enquiry(enquiry_payload(vendorId="v2"))
        assert [e["vendorId"] for e in store.get_enquiries_by_vendor("v2")] == ["v2"]


def test_studio_store_filters(app):
    with app.test_request_context():
        store = StudioEnquiryStore()
        north = store.add_studio_enquiry(studio_payload())
        east = store.add_studio_enquiry(studio_payload(studioName="East Studio", realtorEmail="bob@kwsingapore.com"))

        assert store.get_studio_enquiries_by_studio("North Studio") == [north]
        assert store.get_studio_enquiries_by_realtor("bob@kwsingapore.com") == [east]
        store.update_studio_enquiry_status(east["id"], "rejected")
        assert StudioEnquiryStore().get_studio_enquiries_by_studio("East Studio")[0]["status"] == "rejected"
        assert StudioEnquiryStore().count_by_status() == {"pending": 1, "approved": 0, "rejected": 1, "completed": 0}


def test_stores_use_separate_keys(app):
    with app.test_request_context():
        EnquiryStore().add_enquiry(enquiry_payload())
        assert StudioEnquiryStore().studio_enquiries == []
        raw = get_storage().get_item("enquiries")
        assert len(json.loads(raw)) == 1
