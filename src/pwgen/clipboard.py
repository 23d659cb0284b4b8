"""Clipboard helpers built on pyperclip.

Clearing is best-effort: a daemon timer wipes the clipboard after a delay,
only if it still holds what we put there. Exiting the process cancels it.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import pyperclip

logger = logging.getLogger(__name__)


def copy(text: str) -> None:
    pyperclip.copy(text)


def _clear_if_unchanged(expected: str) -> None:
    try:
        if pyperclip.paste() == expected:
            pyperclip.copy("")
            logger.debug("Clipboard cleared")
    except pyperclip.PyperclipException as exc:
        logger.warning("Could not clear clipboard: %s", exc)


def schedule_clear(text: str, timeout: float) -> Optional[threading.Timer]:
    """Clear *text* from the clipboard after *timeout* seconds.

    Returns the started timer, or ``None`` when *timeout* is not positive.
    The timer is a daemon thread and is never joined.
    """
    if timeout <= 0:
        return None
    timer = threading.Timer(timeout, _clear_if_unchanged, args=(text,))
    timer.daemon = True
    timer.start()
    return timer
