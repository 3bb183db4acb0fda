"""Unit tests for the DocSeal Textual App (Frontend)."""

import pytest
from unittest.mock import patch

from docseal.core.file_manager import DocumentManager
from docseal.core.settings import Settings, SettingsStore
from docseal.frontend.cli.app import DocSealApp, GenerateKeyModal, SettingsModal
from docseal.frontend.cli.clipboard import ClipboardError
from docseal.frontend.cli.context import AppContext
from docseal.security import MAGIC_MARKER, encrypt, generate_key_string


KEY = "abcdefghijklmnop" + "ABCDEFGHIJKLMNOPQRSTUVWXYZ012345"


# --- Fixtures ---

@pytest.fixture
def docs(tmp_path):
    d = tmp_path / "docs"
    d.mkdir()
    (d / "a.md").write_bytes(encrypt(b"alpha", KEY))
    (d / "b.md").write_bytes(b"beta")
    return d


def _context(tmp_path, key=KEY):
    settings = Settings(
        working_directory=str(tmp_path),
        document_directory="docs",
        encryption_key=key,
    )
    return AppContext(
        store=SettingsStore(tmp_path / "settings.json"),
        settings=settings,
        dm=DocumentManager(settings),
        stored_key=key,
    )


@pytest.fixture
def ctx(tmp_path, docs):
    return _context(tmp_path)


# --- Startup ---

@pytest.mark.asyncio
async def test_app_startup_lists_documents(ctx, docs):
    app = DocSealApp(ctx=ctx)
    async with app.run_test():
        table = app.query_one("#documents")
        assert table.row_count == 2
        assert app.row_keys == [str((docs / "a.md").resolve()), str((docs / "b.md").resolve())]


@pytest.mark.asyncio
async def test_app_without_key_shows_no_documents(tmp_path, docs):
    app = DocSealApp(ctx=_context(tmp_path, key=""))
    async with app.run_test():
        assert app.query_one("#documents").row_count == 0
        assert app.row_keys == []


# --- Seal / unseal ---

@pytest.mark.asyncio
async def test_unseal_selected_document(ctx, docs):
    app = DocSealApp(ctx=ctx)
    async with app.run_test() as pilot:
        # Cursor starts on the first row (a.md, sealed).
        await pilot.press("d")
        await pilot.pause()
    assert (docs / "a.md").read_bytes() == b"alpha"


@pytest.mark.asyncio
async def test_seal_selected_document(ctx, docs):
    app = DocSealApp(ctx=ctx)
    async with app.run_test() as pilot:
        await pilot.press("down")
        await pilot.press("e")
        await pilot.pause()
    assert (docs / "b.md").read_bytes().startswith(MAGIC_MARKER)


# --- Active document ---

@pytest.mark.asyncio
async def test_open_then_quit_reseals(ctx, docs):
    app = DocSealApp(ctx=ctx)
    async with app.run_test() as pilot:
        await pilot.press("o")
        await pilot.pause()
        assert (docs / "a.md").read_bytes() == b"alpha"
        assert ctx.dm.active == (docs / "a.md").resolve()
        await pilot.press("q")
    assert (docs / "a.md").read_bytes().startswith(MAGIC_MARKER)
    assert ctx.dm.active is None


# --- Modals ---

@pytest.mark.asyncio
async def test_settings_modal_saves_directory_and_key(ctx, tmp_path):
    new_key = "z" * 48
    app = DocSealApp(ctx=ctx)
    async with app.run_test() as pilot:
        await pilot.press("s")
        await pilot.pause()
        assert isinstance(app.screen, SettingsModal)

        app.screen.dir_input.value = "docs"
        app.screen.key_input.value = new_key
        app.screen._submit()
        await pilot.pause()

    assert ctx.settings.encryption_key == new_key
    stored = SettingsStore(tmp_path / "settings.json").load()
    assert stored.encryption_key == new_key
    assert stored.document_directory == "docs"


@pytest.mark.asyncio
async def test_generate_key_modal(ctx, tmp_path):
    app = DocSealApp(ctx=ctx)
    async with app.run_test() as pilot:
        await pilot.press("g")
        await pilot.pause()
        assert isinstance(app.screen, GenerateKeyModal)

        app.screen.username_input.value = "alice"
        app.screen.password_input.value = "hunter2"
        app.screen._submit()
        await pilot.pause()

    assert ctx.settings.encryption_key == generate_key_string("alice", "hunter2")


@pytest.mark.asyncio
async def test_copy_key_to_clipboard(ctx):
    app = DocSealApp(ctx=ctx)
    with patch("docseal.frontend.cli.app.copy_to_clipboard") as copy:
        async with app.run_test() as pilot:
            await pilot.press("y")
            await pilot.pause()
    copy.assert_called_once_with(KEY)


@pytest.mark.asyncio
async def test_copy_key_without_clipboard_keeps_running(ctx):
    app = DocSealApp(ctx=ctx)
    with patch(
        "docseal.frontend.cli.app.copy_to_clipboard",
        side_effect=ClipboardError("no clipboard"),
    ) as copy:
        async with app.run_test() as pilot:
            await pilot.press("y")
            await pilot.pause()
            assert app.is_running
    copy.assert_called_once_with(KEY)
