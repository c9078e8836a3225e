"""
Runtime tracing for Tile Draw.

Nested, timed spans around the generation stages (seeding, subdivision,
tagging, rendering, saving) plus one-off events, written as indented text
lines to stderr and optionally to a file. Disabled by default.
"""

import functools
import sys
import time
from contextlib import contextmanager
from datetime import datetime

import numpy as np


LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}


class TracerConfig:
    """Where and how much the tracer writes."""

    def __init__(self):
        self.enabled = False
        self.level = "INFO"
        self.file_path = None
        self._file_handle = None

    def configure(self, enabled=False, level="INFO", file_path=None):
        self.close()
        self.enabled = enabled
        self.level = level.upper()
        self.file_path = file_path
        if file_path and enabled:
            self._file_handle = open(file_path, "w", encoding="utf-8")

    def close(self):
        """Close the trace file if one is open."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None


class Tracer:
    """
    Stage tracer.

    Each line reads "HH:MM:SS.mmm LEVEL <indent>module:stage  message",
    indented by span depth. Events inherit the module and stage of the
    innermost open span.
    """

    def __init__(self):
        self.config = TracerConfig()
        self._spans = []

    def _should_log(self, level):
        if not self.config.enabled:
            return False
        return LEVELS.get(level, 2) <= LEVELS.get(self.config.level, 2)

    def _write(self, level, module, stage, message):
        if not self._should_log(level):
            return

        now = datetime.now()
        timestamp = now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"
        location = f"{module}:{stage}" if stage else module
        line = f"{timestamp} {level:<5} {'  ' * len(self._spans)}{location}  {message}"

        print(line, file=sys.stderr)
        if self.config._file_handle:
            self.config._file_handle.write(line + "\n")
            self.config._file_handle.flush()

    @contextmanager
    def span(self, name, module=""):
        """
        Trace a stage: a start line, an end line with the elapsed time, or
        an ERROR line when the stage raises. Exceptions propagate unchanged.
        """
        if not self.config.enabled:
            yield
            return

        self._write("INFO", module, name, "start")
        self._spans.append((name, module))
        start = time.perf_counter()

        try:
            yield
        except Exception as e:
            self._spans.pop()
            elapsed = (time.perf_counter() - start) * 1000
            self._write("ERROR", module, name,
                        f"failed dt={elapsed:.0f}ms error={type(e).__name__}: {str(e)[:100]}")
            raise

        self._spans.pop()
        elapsed = (time.perf_counter() - start) * 1000
        self._write("INFO", module, name, f"end ok dt={elapsed:.0f}ms")

    def event(self, message, level="INFO", **meta):
        """Log a message inside the current span, with key=value details."""
        if not self._should_log(level):
            return

        name, module = self._spans[-1] if self._spans else ("", "")
        details = " ".join(f"{k}={summarize(v)}" for k, v in meta.items())
        self._write(level, module, name, f"{message} {details}".strip())


def summarize(obj, max_len=200):
    """Compact one-line rendering of an event value, capped at max_len chars."""
    if obj is None:
        result = "None"
    elif isinstance(obj, np.ndarray):
        result = f"ndarray({obj.dtype},{'x'.join(str(s) for s in obj.shape)})"
    elif isinstance(getattr(obj, "vertices", None), np.ndarray):
        # ShapeSet and anything else holding a per-shape vertex array
        result = f"{type(obj).__name__}(n={len(obj.vertices)})"
    elif isinstance(obj, str):
        result = repr(obj) if len(obj) <= 50 else f"str(len={len(obj)})"
    elif isinstance(obj, (list, tuple, dict)):
        result = f"{type(obj).__name__}(len={len(obj)})"
    elif isinstance(obj, (bool, int, float, np.integer, np.floating)):
        result = str(obj)
    else:
        result = f"<{type(obj).__name__}>"

    if len(result) > max_len:
        return result[:max_len - 3] + "..."
    return result


def trace(label=None):
    """Run the decorated stage inside a span named label (default: function name)."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.config.enabled:
                return func(*args, **kwargs)

            module = func.__module__.split(".")[-1] if func.__module__ else ""
            with _tracer.span(label or func.__name__, module=module):
                return func(*args, **kwargs)

        return wrapper
    return decorator


_tracer = Tracer()


def get_tracer():
    """Get the global tracer instance."""
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None):
    """Configure the global tracer."""
    _tracer.config.configure(enabled=enabled, level=level, file_path=file_path)
