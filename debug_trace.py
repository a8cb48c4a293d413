"""
debug_trace.py

Debug instrumentation for arrow rendering.
Disabled by default; enable via the [debug] settings section or configure().

Categories used by the project:
    MAIN     application startup and shutdown (main.py)
    PAINT    one line per arrow painted, with its curve and style; only
             emitted when TRACE_PAINT is on as well
    PATH     path fallbacks, e.g. a dash pattern that cannot advance and is
             stroked solid instead
    OVERLAY  ArrowOverlay connector add/remove (via @trace_call)
    ERROR    exceptions from trace_exception() and @trace_call
    CRASH    uncaught exceptions reported by the demo's excepthook

Unresolved connector endpoints are part of normal layout and never traced.
"""

import sys
import traceback
from datetime import datetime
from functools import wraps
from typing import Optional

# Set to True to enable debug tracing
DEBUG_TRACE = False

# Set to True to trace paint events (very verbose)
TRACE_PAINT = False

# Log file (None for stderr only)
LOG_FILE: Optional[str] = None

_log_file = None


def configure(enabled: bool, trace_paint: bool = False, log_file: Optional[str] = None):
    """Set trace switches, typically from the [debug] settings section."""
    global DEBUG_TRACE, TRACE_PAINT, LOG_FILE
    close_log()
    DEBUG_TRACE = bool(enabled)
    TRACE_PAINT = bool(trace_paint)
    LOG_FILE = log_file or None


def _get_log_file():
    global _log_file
    if LOG_FILE and _log_file is None:
        try:
            _log_file = open(LOG_FILE, "w", encoding="utf-8")
        except OSError:
            pass
    return _log_file


def trace(msg: str, category: str = "INFO"):
    """Print a trace message with timestamp.

    Lines look like ``[HH:MM:SS.mmm] [CATEGORY] msg`` and go to stderr, and
    to LOG_FILE when one is configured. PAINT lines are dropped unless
    TRACE_PAINT is set.
    """
    if not DEBUG_TRACE:
        return
    if category == "PAINT" and not TRACE_PAINT:
        return

    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{timestamp}] [{category}] {msg}"

    print(line, file=sys.stderr, flush=True)

    log_file = _get_log_file()
    if log_file:
        try:
            log_file.write(line + "\n")
            log_file.flush()
        except OSError:
            pass


def trace_exception(msg: str = "Exception"):
    """Print exception info."""
    if not DEBUG_TRACE:
        return
    trace(f"{msg}: {traceback.format_exc()}", "ERROR")


def trace_call(category: str = "CALL"):
    """Decorator to trace function calls."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not DEBUG_TRACE:
                return func(*args, **kwargs)
            func_name = func.__qualname__
            trace(f">>> {func_name}", category)
            try:
                result = func(*args, **kwargs)
                trace(f"<<< {func_name}", category)
                return result
            except Exception as e:
                trace(f"!!! {func_name} raised {type(e).__name__}: {e}", "ERROR")
                raise
        return wrapper
    return decorator


def close_log():
    """Close log file."""
    global _log_file
    if _log_file:
        try:
            _log_file.close()
        except OSError:
            pass
        _log_file = None
