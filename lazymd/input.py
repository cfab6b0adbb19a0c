"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens
(``ESC``, ``UP``, ``PAGE_DOWN``, ``CTRL_C`` or the typed character).
Escape sequences with no binding decode to ``UNKNOWN``.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
UNKNOWN_KEY = "UNKNOWN"
_PENDING_BYTES: list[bytes] = []

_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}
_CSI_TILDE_KEYS = {
    b"1": "HOME",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, lead: bytes) -> str:
    """Complete a multi-byte UTF-8 character that started with ``lead``."""
    first = lead[0]
    if first >= 0xF0:
        remaining = 3
    elif first >= 0xE0:
        remaining = 2
    elif first >= 0xC0:
        remaining = 1
    else:
        remaining = 0
    data = lead
    for _ in range(remaining):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Return the next key token, or ``""`` when ``timeout_ms`` elapses first."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch == b"\x03":
        return "CTRL_C"
    if ch == b"\r":
        return "ENTER"
    if ch == b"\n":
        return "ENTER"

    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch)
    return _read_escape_sequence(fd)


def _read_escape_sequence(fd: int) -> str:
    """Decode the bytes after ESC.

    A lone ESC (nothing follows in time) is ``ESC``. Complete sequences that
    map to no key, and Alt+key chords, are consumed whole and reported as
    ``UNKNOWN`` so they never leave stray bytes behind.
    """
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return "ESC"
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _CSI_FINAL_KEYS.get(final, UNKNOWN_KEY)
    if seq != b"[":
        if seq[0] >= 0xC0:
            _read_utf8_tail(fd, seq)
        return UNKNOWN_KEY

    params = b""
    while True:
        byte = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if byte is None:
            return "ESC"
        if 0x40 <= byte[0] <= 0x7E:
            break
        params += byte
    if byte == b"~":
        return _CSI_TILDE_KEYS.get(params, UNKNOWN_KEY)
    if not params:
        return _CSI_FINAL_KEYS.get(byte, UNKNOWN_KEY)
    return UNKNOWN_KEY
