# pixi_art/utils.py
from __future__ import annotations

"""
Shared utilities for pixi_art.

Includes time formatting, the colour usage report printed after each run,
and tidy print-based logging used by the CLI and the debug paths of the
sharpen / quantize stages.
"""

import io
import sys
import threading
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional, TextIO, Tuple

import numpy as np

from .constants import ALPHA_OPAQUE_MIN
from .core_types import PixelBuffer, rgb_to_hex


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Colour helpers


def opaque_mask(buffer: PixelBuffer) -> np.ndarray:
    """Boolean (H,W) mask of pixels with alpha >= ALPHA_OPAQUE_MIN."""
    return buffer[..., 3] >= ALPHA_OPAQUE_MIN


def colour_usage_report(buffer: PixelBuffer) -> List[Tuple[str, int]]:
    """
    Compute a colour usage report for opaque pixels.

    Returns a list of (hex, count) sorted by count descending, then hex.
    """
    mask = opaque_mask(buffer)
    if not np.any(mask):
        return []
    flat = buffer[..., :3][mask].reshape(-1, 3)
    uniques, counts = np.unique(flat, axis=0, return_counts=True)
    report: List[Tuple[str, int]] = []
    for rgb_row, count in zip(uniques.tolist(), counts.tolist()):
        report.append((rgb_to_hex((rgb_row[0], rgb_row[1], rgb_row[2])), int(count)))
    report.sort(key=lambda x: (-x[1], x[0]))
    return report


#  CLI / progress logging


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live printing in terminals that expose .reconfigure().
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging

_sink = threading.local()


class LogCapture:
    """Log text captured on one thread; stdout and stderr lines kept apart."""

    def __init__(self) -> None:
        self.out = io.StringIO()
        self.err = io.StringIO()


def _active_capture() -> Optional[LogCapture]:
    return getattr(_sink, "capture", None)


def _log_stream() -> TextIO:
    """This thread's captured stdout if active, else the current sys.stdout."""
    cap = _active_capture()
    return sys.stdout if cap is None else cap.out


def _error_stream() -> TextIO:
    """This thread's captured stderr if active, else the current sys.stderr."""
    cap = _active_capture()
    return sys.stderr if cap is None else cap.err


@contextmanager
def capture_log_output() -> Iterator[LogCapture]:
    """
    Route this thread's log and error lines into a LogCapture.
    Used by batch mode so each file's block can be printed in input order.
    """
    cap = LogCapture()
    prev = _active_capture()
    _sink.capture = cap
    try:
        yield cap
    finally:
        _sink.capture = prev


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [stylize] Size: 64x48  Colours: 8  Detail: 0.25  Resample: nearest  Scale: 20
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", file=_log_stream(), flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, file=_log_stream(), flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", file=_log_stream(), flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", file=_log_stream(), flush=True)


def error(message: str) -> None:
    """Error log line to stderr (or this thread's captured stderr)."""
    print(f"[error] {message}", file=_error_stream(), flush=True)


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_total_duration_compact",
    "format_bool_on_off",
    "format_number_compact",
    # colour helpers
    "opaque_mask",
    "colour_usage_report",
    # logging
    "LogCapture",
    "capture_log_output",
    "enable_line_buffered_stdout",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
