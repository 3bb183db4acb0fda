"""Key backup through the system clipboard.

The TUI copies the configured key string here so it can be pasted into a
password manager. Sealed documents cannot be recovered without it.
"""

from __future__ import annotations

import pyperclip

# No clipboard mechanism available (e.g. a headless Linux session).
ClipboardError = pyperclip.PyperclipException


def copy_to_clipboard(text: str) -> None:
    """Put ``text`` (normally the encryption key) on the clipboard.

    Raises:
        ClipboardError: If clipboard access fails.
    """
    pyperclip.copy(text)
