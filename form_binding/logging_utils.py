import json, time, threading, logging
from typing import Dict, Any, Optional

from . import config

_LOG_LOCK = threading.Lock()


def configure_logging(level: int = logging.INFO, stream=None) -> logging.Logger:
    """Attach a stream handler using LOG_FORMAT to the package logger."""
    logger = logging.getLogger("form_binding")
    logger.setLevel(level)
    # Replace rather than stack handlers on repeated calls
    for h in [h for h in logger.handlers if getattr(h, "_form_binding", False)]:
        logger.removeHandler(h)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    handler._form_binding = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


def log_form_operation(operation: str, summary: Dict[str, Any], started_ts: float, log_file: Optional[str] = None):
    """Append one JSON line describing a fill/read call. Values are never recorded."""
    path = log_file or config.FORM_OPERATIONS_LOG
    if not path:
        return
    try:
        rec = {
            "ts": time.time(),
            "duration_ms": round((time.time() - started_ts) * 1000, 2),
            "operation": operation,
            "field_count": summary.get("filled_count", summary.get("read_count")),
            "skipped_count": len(summary.get("skipped", [])),
        }
        line = json.dumps(rec, ensure_ascii=False)
        with _LOG_LOCK:
            with open(path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
    except Exception:
        logging.getLogger(__name__).debug("Could not write form operation log", exc_info=True)
