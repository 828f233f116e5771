import json
from pathlib import Path

from formsapp.config import get_settings
from formsapp.exceptions import PersistenceError


class JsonStore:
    """Reads/writes templates, forms, tags, users, tokens, comments, likes and
    favorites to a local JSON file.

    Each collection is a mapping from key to record; `_counters` hands out
    sequential ids per collection.
    """

    def __init__(self, path: Path):
        self.path = path

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read store file {self.path}: {e}") from e

    def _write_all(self, data: dict) -> None:
        try:
            self.path.write_text(json.dumps(data, indent=2))
        except OSError as e:
            raise PersistenceError(f"Could not write store file {self.path}: {e}") from e

    def get(self, collection: str, key: str) -> dict | None:
        return self._read_all().get(collection, {}).get(key)

    def list(self, collection: str) -> list[dict]:
        return list(self._read_all().get(collection, {}).values())

    def save(self, collection: str, key: str, record: dict) -> None:
        data = self._read_all()
        data.setdefault(collection, {})[key] = record
        self._write_all(data)

    def delete(self, collection: str, key: str) -> bool:
        data = self._read_all()
        removed = data.get(collection, {}).pop(key, None)
        if removed is not None:
            self._write_all(data)
        return removed is not None

    def delete_where(self, collection: str, **match) -> int:
        """Delete every record whose fields equal the given values. Returns how many went."""
        data = self._read_all()
        records = data.get(collection, {})
        doomed = [k for k, r in records.items() if all(r.get(f) == v for f, v in match.items())]
        for key in doomed:
            del records[key]
        if doomed:
            self._write_all(data)
        return len(doomed)

    def next_id(self, collection: str) -> str:
        data = self._read_all()
        counters = data.setdefault("_counters", {})
        counters[collection] = counters.get(collection, 0) + 1
        self._write_all(data)
        return str(counters[collection])


def _get_store() -> JsonStore:
    return JsonStore(get_settings().store_file)
