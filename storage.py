# storage.py — JSON key/value document standing in for browser localStorage
# Keys: "enquiries", "studio-enquiries", "invoices". Values are JSON strings,
# every set_item rewrites the whole document (last write wins).
import os, json, tempfile
from flask import current_app

ENQUIRIES_KEY = "enquiries"
STUDIO_ENQUIRIES_KEY = "studio-enquiries"
INVOICES_KEY = "invoices"


class LocalStorage:
    def __init__(self, path: str):
        self.path = path
        d = os.path.dirname(path)
        if d:
            os.makedirs(d, exist_ok=True)
        if not os.path.exists(path):
            self._write({})

    def _read(self) -> dict:
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError:
                current_app.logger.warning("[STORAGE] unreadable document %s; starting empty", self.path)
                return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict):
        # temp file + rename so readers never see a partial document
        fd, tmp = tempfile.mkstemp(dir=os.path.dirname(self.path) or ".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def get_item(self, key: str):
        return self._read().get(key)

    def set_item(self, key: str, value: str):
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str):
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


def get_storage() -> LocalStorage:
    return LocalStorage(current_app.config["STORAGE_PATH"])


def load_array(storage: LocalStorage, key: str) -> list:
    """Parse a JSON array stored under key; corrupt values are dropped."""
    raw = storage.get_item(key)
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except (TypeError, ValueError) as e:
        current_app.logger.error("[STORAGE] error parsing %s: %s", key, e)
        storage.remove_item(key)
        return []
    if not isinstance(items, list):
        current_app.logger.error("[STORAGE] %s is not an array; removing", key)
        storage.remove_item(key)
        return []
    return items


def save_array(storage: LocalStorage, key: str, items: list):
    storage.set_item(key, json.dumps(items, ensure_ascii=False))
