from __future__ import annotations

import os
import sys
import traceback
from typing import Optional, TextIO

DEBUG_PY_TRACE_ENV = "SABLE_DEBUG_PY_TRACE"

_TRUTHY = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    """True when SABLE_DEBUG_PY_TRACE asks for Python tracebacks on errors."""
    return os.environ.get(DEBUG_PY_TRACE_ENV, "").strip().lower() in _TRUTHY


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_ENV, None)


def report_error(exc: BaseException, stream: Optional[TextIO] = None) -> None:
    """Print a Sable error, plus the Python traceback when debugging."""
    if stream is None:
        stream = sys.stderr

    print(f"Error: {exc}", file=stream)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=stream)
        print("".join(traceback.format_tb(exc.__traceback__)), file=stream, end="")
