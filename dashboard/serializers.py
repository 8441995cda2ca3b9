import dataclasses
from datetime import date, datetime

from flask.json.provider import DefaultJSONProvider


def to_jsonable(value):
    """Recursively turn records into JSON-safe values (ISO-8601 dates)."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


class DashboardJSONProvider(DefaultJSONProvider):
    """jsonify() with ISO-8601 dates and dataclass support."""

    def dumps(self, obj, **kwargs):
        return super().dumps(to_jsonable(obj), **kwargs)
