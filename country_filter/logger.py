import os
import re
from datetime import datetime, timezone


DEFAULT_LOG_PATH = "/var/log/country-filter.log"


def _log_path():
    return os.environ.get("COUNTRY_FILTER_LOG_PATH", DEFAULT_LOG_PATH)


def _sanitize(text):
    value = str(text)
    value = re.sub(r"\s+", " ", value).strip()
    return value


def _field_value(value):
    value = getattr(value, "value", value)
    return re.sub(r"\s+", "_", str(value).strip()) or "-"


def log_event(component: str, message: str, **fields) -> None:
    path = _log_path()
    line = (
        f"{datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')} "
        f"[{_sanitize(component)}] {_sanitize(message)}"
    )
    if fields:
        line += " " + " ".join(f"{key}={_field_value(value)}" for key, value in fields.items())
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except Exception:
        return
