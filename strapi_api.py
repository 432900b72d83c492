# strapi_api.py — client for the Strapi content API (vendor and studio listings)
from typing import Optional
import requests
from flask import current_app

DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class StrapiError(Exception):
    def __init__(self, message, status=502):
        super().__init__(message)
        self.status = status


def _date_only(ts: Optional[str]) -> str:
    return (ts or "").split("T")[0]


def format_operating_hours(hours: Optional[dict]) -> str:
    """{'monday': {'open','close','closed'}, ...} -> 'Monday: 09:00 - 18:00, ...' (closed days skipped)."""
    if not hours:
        return ""
    out = []
    for day in DAYS:
        d = hours.get(day)
        if d and not d.get("closed"):
            out.append(f"{day.capitalize()}: {d.get('open', '')} - {d.get('close', '')}")
    return ", ".join(out)


def parse_operating_hours(text: str) -> dict:
    """Inverse of format_operating_hours; days not mentioned are closed."""
    if not (text or "").strip():
        return {}
    result = {day: {"open": "", "close": "", "closed": True} for day in DAYS}
    for part in text.split(","):
        day, sep, span = part.strip().partition(":")
        day = day.strip().lower()
        if not sep or day not in result or "-" not in span:
            continue
        open_, _, close = span.partition("-")
        result[day] = {"open": open_.strip(), "close": close.strip(), "closed": False}
    return result


def convert_strapi_studio(s: dict) -> dict:
    contact = s.get("contact") or {}
    return {
        "id": str(s.get("id")),
        "name": s.get("name") or "",
        "address": s.get("address") or "",
        "description": s.get("description") or "",
        "image": s.get("image") or "",
        "status": s.get("status") or "active",
        "equipment": s.get("equipment") or [],
        "operatingHours": format_operating_hours(s.get("operatingHours")),
        "contact": {"email": contact.get("email") or "", "phone": contact.get("phone") or ""},
        "createdAt": _date_only(s.get("createdAt")),
        "updatedAt": _date_only(s.get("updatedAt")),
    }


def convert_strapi_vendor(v: dict) -> dict:
    contact = v.get("contact") or {}
    return {
        "id": str(v.get("id")),
        "name": v.get("name") or "",
        "company": v.get("company") or "",
        "services": v.get("services") or [],
        "location": v.get("location") or "",
        "rating": float(v.get("rating") or 0),
        "projects": int(v.get("projects") or 0),
        "experience": v.get("experience") or "",
        "description": v.get("description") or "",
        "specialties": v.get("specialties") or [],
        "status": v.get("status") or "pending",
        "contact": {
            "email": contact.get("email") or "",
            "phone": contact.get("phone") or "",
            "address": contact.get("address") or "",
        },
        "image": v.get("image") or "",
        "createdAt": _date_only(v.get("createdAt")),
        "updatedAt": _date_only(v.get("updatedAt")),
    }


class StrapiClient:
    def __init__(self, base_url: str, timeout: float = 12):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    # ---------- transport ----------
    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            current_app.logger.warning("[STRAPI] %s %s failed: %s", method, path, e)
            raise StrapiError(f"Content API unreachable: {e}") from e

    @staticmethod
    def _fail(r: requests.Response, action: str) -> StrapiError:
        try:
            msg = ((r.json() or {}).get("error") or {}).get("message")
        except ValueError:
            msg = None
        current_app.logger.warning("[STRAPI] failed to %s: %s %s", action, r.status_code, msg or r.reason)
        return StrapiError(f"Failed to {action}: {msg or r.reason}", r.status_code)

    def _list(self, collection: str, params: dict) -> list:
        r = self._request("GET", f"/api/{collection}", params=params or None)
        if not r.ok:
            raise self._fail(r, f"fetch {collection}")
        return (r.json() or {}).get("data") or []

    def _get(self, collection: str, item_id: str):
        r = self._request("GET", f"/api/{collection}/{item_id}")
        if r.status_code == 404:
            return None
        if not r.ok:
            raise self._fail(r, f"fetch {collection}")
        return (r.json() or {}).get("data")

    def _write(self, method: str, path: str, data: dict, action: str) -> dict:
        r = self._request(method, path, json={"data": data})
        if not r.ok:
            raise self._fail(r, action)
        return (r.json() or {}).get("data")

    def _delete(self, collection: str, item_id: str):
        r = self._request("DELETE", f"/api/{collection}/{item_id}")
        if not r.ok:
            raise self._fail(r, f"delete {collection}")

    @staticmethod
    def _filters(status=None, search=None, location=None, search_fields=()) -> dict:
        params = {}
        if status and status != "all":
            params["filters[status][$eq]"] = status
        if search:
            for i, field in enumerate(search_fields):
                params[f"filters[$or][{i}][{field}][$containsi]"] = search
        if location:
            params["filters[location][$containsi]"] = location
        return params

    # ---------- vendors ----------
    def get_vendors(self, status=None, search=None, location=None) -> list:
        return self._list("vendors", self._filters(status, search, location,
                                                   ("name", "company", "description")))

    def get_vendor(self, vendor_id: str):
        return self._get("vendors", vendor_id)

    def create_vendor(self, vendor: dict) -> dict:
        data = {
            "name": vendor["name"],
            "company": vendor["company"],
            "services": vendor.get("services") or [],
            "location": vendor["location"],
            "rating": vendor.get("rating") or 5.0,
            "projects": vendor.get("projects") or 0,
            "experience": vendor.get("experience") or "",
            "description": vendor["description"],
            "specialties": vendor.get("specialties") or [],
            "status": vendor.get("status") or "pending",
            "contact": vendor["contact"],
            "image": vendor.get("image") or None,
        }
        return self._write("POST", "/api/vendors", data, "create vendor")

    def update_vendor(self, vendor_id: str, changes: dict) -> dict:
        return self._write("PUT", f"/api/vendors/{vendor_id}", changes, "update vendor")

    def delete_vendor(self, vendor_id: str):
        self._delete("vendors", vendor_id)

    # ---------- studios ----------
    def get_studios(self, status=None, search=None) -> list:
        return self._list("studios", self._filters(status, search, None,
                                                   ("name", "address", "description")))

    def get_studio(self, studio_id: str):
        return self._get("studios", studio_id)

    def create_studio(self, studio: dict) -> dict:
        data = {
            "name": studio["name"],
            "address": studio["address"],
            "description": studio["description"],
            "image": studio.get("image") or None,
            "status": studio.get("status") or "active",
            "equipment": studio.get("equipment") or [],
            "operatingHours": parse_operating_hours(studio.get("operatingHours") or ""),
            "contact": {"email": studio["contact"]["email"], "phone": studio["contact"]["phone"]},
        }
        return self._write("POST", "/api/studios", data, "create studio")

    def update_studio(self, studio_id: str, changes: dict) -> dict:
        data = {k: v for k, v in changes.items()
                if k in ("name", "address", "description", "status", "equipment", "contact")}
        if "image" in changes:
            data["image"] = changes["image"] or None
        if "operatingHours" in changes:
            data["operatingHours"] = parse_operating_hours(changes["operatingHours"] or "")
        return self._write("PUT", f"/api/studios/{studio_id}", data, "update studio")

    def delete_studio(self, studio_id: str):
        self._delete("studios", studio_id)


def get_client() -> StrapiClient:
    cfg = current_app.config
    return StrapiClient(cfg["STRAPI_BASE_URL"], timeout=cfg["STRAPI_TIMEOUT"])
