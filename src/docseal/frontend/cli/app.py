"""Textual document manager for DocSeal.

Start here with `python -m docseal.frontend.cli.app`
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static

from docseal.core.exceptions import DocSealError
from docseal.core.file_manager import Failure
from docseal.frontend.cli.clipboard import ClipboardError, copy_to_clipboard
from docseal.frontend.cli.commands import _human_size
from docseal.frontend.cli.context import AppContext, build_context
from docseal.security import generate_key_string


# === Modal definitions ===


class SettingsResult:
    def __init__(self, document_directory: str, key: str | None):
        self.document_directory = document_directory
        self.key = key


class SettingsModal(ModalScreen[Optional[SettingsResult]]):
    """Edit the document directory and encryption key."""

    def __init__(self, document_directory: str = ""):
        super().__init__()
        self.document_directory = document_directory

    def compose(self) -> ComposeResult:  # pragma: no cover - UI only
        with Vertical(classes="dialog"):
            yield Static("Settings", classes="title")
            yield Label("Document directory (blank manages everything)")
            self.dir_input = Input(placeholder="documents/", value=self.document_directory)
            yield self.dir_input
            yield Label("Encryption key (blank keeps the current key)")
            self.key_input = Input(placeholder="••••••", password=True)
            yield self.key_input
            yield Static(
                "Back up your key: sealed documents cannot be recovered without it.",
                classes="section-label",
            )
            with Horizontal():
                yield Button("Cancel (Esc)", id="cancel")
                yield Button("Save (Enter)", id="ok", variant="primary")

    def on_mount(self) -> None:  # pragma: no cover
        self.set_focus(self.dir_input)

    def _submit(self) -> None:
        key = self.key_input.value or None
        self.dismiss(
            SettingsResult(document_directory=self.dir_input.value.strip(), key=key)
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:  # pragma: no cover
        if event.button.id == "cancel":
            self.dismiss(None)
        else:
            self._submit()

    def on_key(self, event) -> None:  # pragma: no cover
        if event.key == "escape":
            self.dismiss(None)
        elif event.key == "enter":
            self._submit()


class GenerateKeyModal(ModalScreen[Optional[str]]):
    """Derive a key string from a username and password."""

    def compose(self) -> ComposeResult:  # pragma: no cover - UI only
        with Vertical(classes="dialog"):
            yield Static("Generate Key", classes="title")
            yield Label("Username")
            self.username_input = Input(placeholder="alice")
            yield self.username_input
            yield Label("Password")
            self.password_input = Input(placeholder="••••••", password=True)
            yield self.password_input
            with Horizontal():
                yield Button("Cancel", id="cancel")
                yield Button("Generate", id="ok", variant="primary")

    def on_mount(self) -> None:  # pragma: no cover
        self.set_focus(self.username_input)

    def _submit(self) -> None:
        try:
            key = generate_key_string(self.username_input.value, self.password_input.value)
        except ValueError:
            self.app.notify("Username and password are required", severity="error")
            return
        self.dismiss(key)

    def on_button_pressed(self, event: Button.Pressed) -> None:  # pragma: no cover
        if event.button.id == "cancel":
            self.dismiss(None)
        else:
            self._submit()

    def on_key(self, event) -> None:  # pragma: no cover
        if event.key == "escape":
            self.dismiss(None)
        elif event.key == "enter":
            self._submit()


class DocSealApp(App):
    """Lists managed documents and seals/unseals them on demand."""

    TITLE = "DocSeal"

    CSS = """
    #main { border: heavy $surface; }
    .title { padding: 1 1; text-style: bold; }
    #status { padding: 0 1 1 1; height: 3; color: $text-muted; }
    .section-label { padding: 0 1; color: $text-muted; }
    ModalScreen { align: center middle; background: rgba(0,0,0,0.45); }
    .dialog { width: 75%; height: 75%; padding: 1; border: heavy $surface; background: $boost; }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
        ("e", "seal", "Encrypt"),
        ("d", "unseal", "Decrypt"),
        ("o", "open_document", "Open"),
        ("s", "settings", "Settings"),
        ("g", "generate_key", "Generate Key"),
        ("y", "copy_key", "Copy Key"),
    ]

    def __init__(self, ctx: AppContext | None = None):
        self.ctx = ctx or build_context()
        super().__init__()

        self.table: DataTable | None = None
        self.status: Static | None = None
        self.row_keys: list[str] = []

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="main"):
            yield Static("DOCUMENTS", classes="title")
            self.table = DataTable(id="documents")
            yield self.table
            self.status = Static("", id="status")
            yield self.status
        yield Footer()

    def on_mount(self) -> None:
        assert self.table is not None
        self.table.cursor_type = "row"
        self.table.add_columns("Name", "Size", "State", "Modified", "Path")
        self.refresh_documents()

    def refresh_documents(self) -> None:
        assert self.table is not None
        self.table.clear(columns=False)
        self.row_keys = []

        if not self.ctx.settings.has_key:
            self._set_status("⚠ Configure an encryption key first (press s or g)")
            return

        try:
            docs = self.ctx.dm.list_documents()
        except OSError as exc:  # pragma: no cover - UI-only
            self._set_status(f"Error loading documents: {exc}")
            return

        for d in docs:
            modified = d.modified_at.isoformat(timespec="seconds") if d.modified_at else "--"
            marker = "● " if self.ctx.dm.active == d.path.resolve() else ""
            self.table.add_row(
                marker + d.name,
                _human_size(d.size),
                d.state.value,
                modified,
                str(d.path.relative_to(self.ctx.dm.document_root)),
                key=str(d.path),
            )
            self.row_keys.append(str(d.path))

        if not docs:
            self._set_status(f"No documents under {self.ctx.dm.document_root}")
            return
        self._update_status()

    def _set_status(self, message: str) -> None:
        if self.status:
            self.status.update(message)

    def _update_status(self) -> None:
        active = self.ctx.dm.active.name if self.ctx.dm.active else "(none)"
        assert self.table is not None
        self._set_status(
            f"Directory: {self.ctx.dm.document_root} • Documents: {self.table.row_count} • Open: {active}"
        )

    def _selected_path(self) -> Optional[Path]:
        if self.table is None or not self.row_keys:
            return None
        row = self.table.cursor_row
        if row is None or row < 0 or row >= len(self.row_keys):
            return None
        return Path(self.row_keys[row])

    def _report(self, failures: List[Failure]) -> None:
        for path, exc in failures:
            self.notify(f"{path.name}: {exc}", title="Failed", severity="error")

    # === Actions ===

    def action_refresh(self) -> None:
        self.refresh_documents()

    def action_seal(self) -> None:
        path = self._selected_path()
        if path is None:
            self._set_status("Select a document first")
            return
        try:
            doc = self.ctx.dm.seal(path)
        except DocSealError as exc:
            self.notify(f"Encryption failed: {exc}", severity="error")
        else:
            self.notify(f"{doc.name} encrypted")
        self.refresh_documents()

    def action_unseal(self) -> None:
        path = self._selected_path()
        if path is None:
            self._set_status("Select a document first")
            return
        try:
            doc = self.ctx.dm.unseal(path)
        except DocSealError as exc:
            self.notify(f"Decryption failed: {exc}", severity="error")
        else:
            self.notify(f"{doc.name} decrypted")
        self.refresh_documents()

    def action_open_document(self) -> None:
        path = self._selected_path()
        if path is None:
            self._set_status("Select a document first")
            return
        self._report(self.ctx.dm.switch_to(path))
        self.refresh_documents()

    def action_settings(self) -> None:
        self.push_screen(
            SettingsModal(document_directory=self.ctx.settings.document_directory),
            self._handle_settings,
        )

    def _handle_settings(self, result: Optional[SettingsResult]) -> None:
        if not result:
            return
        self.ctx.settings.document_directory = result.document_directory
        if result.key:
            self.ctx.set_key(result.key)
        else:
            self.ctx.save_settings()
        self.notify("Settings saved")
        self.refresh_documents()

    def action_generate_key(self) -> None:
        self.push_screen(GenerateKeyModal(), self._handle_generate_key)

    def _handle_generate_key(self, key: Optional[str]) -> None:
        if not key:
            return
        self.ctx.set_key(key)
        self.notify("New encryption key generated")
        self.refresh_documents()

    def action_copy_key(self) -> None:
        if not self.ctx.settings.has_key:
            self.notify("No encryption key configured", severity="warning")
            return
        try:
            copy_to_clipboard(self.ctx.settings.encryption_key)
        except ClipboardError as exc:
            self.notify(f"Clipboard unavailable: {exc}", severity="error")
            return
        self.notify("Encryption key copied to clipboard")

    def action_quit(self) -> None:
        """Override quit to seal the open document first."""
        self._report(self.ctx.dm.close())
        self.exit()


if __name__ == "__main__":  # pragma: no cover
    DocSealApp().run()
