import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

DEFAULT_LOG_PATH = Path.home() / "DropSeriesPlotter_error.log"

_log_path: Path = DEFAULT_LOG_PATH


def configure_log_path(path: Union[str, Path, None]) -> Path:
    """Redirect diagnostics to ``path`` (``None`` restores the default)."""
    global _log_path
    _log_path = Path(path).expanduser() if path else DEFAULT_LOG_PATH
    return _log_path


def current_log_path() -> Path:
    return _log_path


def _safe_text(value: Any, max_len: int = 800) -> str:
    try:
        text = str(value)
    except Exception:
        text = repr(value)
    text = text.replace("\r", "\\r").replace("\n", "\\n")
    if len(text) > max_len:
        return text[: max_len - 3] + "..."
    return text


def format_fields(**fields: Any) -> str:
    return " ".join(f"{key}={_safe_text(value, 120)}" for key, value in fields.items())


def log_event(
    context: str,
    message: str = "",
    log_path: Optional[Path] = None,
    **fields: Any,
) -> None:
    """Append one line: timestamp | context | message key=value..."""
    text = " ".join(part for part in (str(message or ""), format_fields(**fields)) if part)
    try:
        with open(log_path or _log_path, "a", encoding="utf-8") as f:
            f.write(f"{datetime.now().isoformat()}  |  {context}  |  {_safe_text(text)}\n")
    except Exception:
        pass


def log_exception(context: str, log_path: Optional[Path] = None) -> None:
    """Append the current exception traceback to the log file."""
    try:
        with open(log_path or _log_path, "a", encoding="utf-8") as f:
            f.write("\n\n" + "=" * 80 + "\n")
            f.write(f"{datetime.now().isoformat()}  |  {context}\n")
            traceback.print_exc(file=f)
    except Exception:
        # Never crash the app due to logging failures
        pass
