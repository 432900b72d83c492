# enquiries.py — realtor → vendor enquiries kept under the "enquiries" storage key
import time
from datetime import datetime, timezone
from flask import current_app
from pydantic import ValidationError

from schemas import EnquiryCreate, ENQUIRY_STATUSES
from storage import ENQUIRIES_KEY, LocalStorage, get_storage, load_array, save_array


class EnquiryValidationError(ValueError):
    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or []


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RecordStore:
    """
    Array of JSON records persisted under one storage key.
    Each mutation rewrites the whole array; status changes are not checked
    against a transition table (any known status from any state).
    """
    key = None
    schema = None
    label = "record"

    def __init__(self, storage: LocalStorage = None):
        self.storage = storage or get_storage()
        self.items = load_array(self.storage, self.key)

    def _save(self, items: list):
        self.items = items
        save_array(self.storage, self.key, items)

    def _next_id(self) -> str:
        ts = int(time.time() * 1000)
        taken = {str(r.get("id")) for r in self.items}
        while str(ts) in taken:
            ts += 1
        return str(ts)

    def _add(self, data: dict) -> dict:
        try:
            rec = self.schema.model_validate(data or {}).to_record()
        except ValidationError as e:
            raise EnquiryValidationError(
                f"invalid_{self.label}", e.errors(include_url=False, include_context=False)
            ) from e
        rec["id"] = self._next_id()
        rec["createdAt"] = now_iso()
        self._save(self.items + [rec])
        current_app.logger.info("[ENQ] %s %s added (status=%s)", self.label, rec["id"], rec["status"])
        return rec

    def _update_status(self, record_id: str, status: str):
        if status not in ENQUIRY_STATUSES:
            raise EnquiryValidationError("bad_status")
        found = None
        updated = []
        for rec in self.items:
            if str(rec.get("id")) == str(record_id):
                rec = {**rec, "status": status}
                found = rec
            updated.append(rec)
        if found is None:
            return None
        self._save(updated)
        current_app.logger.info("[ENQ] %s %s -> %s", self.label, record_id, status)
        return found

    def _filter(self, field: str, value) -> list:
        return [rec for rec in self.items if rec.get(field) == value]

    def get(self, record_id: str):
        return next((rec for rec in self.items if str(rec.get("id")) == str(record_id)), None)

    def count_by_status(self) -> dict:
        counts = {s: 0 for s in ENQUIRY_STATUSES}
        for rec in self.items:
            if rec.get("status") in counts:
                counts[rec["status"]] += 1
        return counts


class EnquiryStore(RecordStore):
    key = ENQUIRIES_KEY
    schema = EnquiryCreate
    label = "enquiry"

    @property
    def enquiries(self) -> list:
        return list(self.items)

    def add_enquiry(self, data: dict) -> dict:
        return self._add(data)

    def update_enquiry_status(self, enquiry_id: str, status: str):
        return self._update_status(enquiry_id, status)

    def get_enquiries_by_vendor(self, vendor_id: str) -> list:
        return self._filter("vendorId", str(vendor_id))

    def get_enquiries_by_realtor(self, realtor_id: str) -> list:
        return self._filter("realtorId", str(realtor_id))
