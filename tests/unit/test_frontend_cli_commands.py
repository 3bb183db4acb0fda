"""Unit tests for the argparse command line."""

import json

import pytest

from docseal.frontend.cli import commands
from docseal.frontend.cli.context import KEY_ENV, SETTINGS_ENV
from docseal.security import MAGIC_MARKER


KEY = "abcdefghijklmnop" + "ABCDEFGHIJKLMNOPQRSTUVWXYZ012345"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(KEY_ENV, raising=False)
    monkeypatch.delenv(SETTINGS_ENV, raising=False)


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.json"


@pytest.fixture
def docs(tmp_path):
    d = tmp_path / "docs"
    d.mkdir()
    return d


@pytest.fixture
def configured(settings_path, docs):
    """Settings file with a key and document directory."""
    settings_path.write_text(
        json.dumps({"document_directory": str(docs), "encryption_key": KEY}),
        encoding="utf-8",
    )
    return settings_path


def run(settings_path, *args):
    return commands.main(["--settings", str(settings_path), *args])


def test_human_size_formatting():
    assert commands._human_size(100) == "100 B"
    assert commands._human_size(1024) == "1.0 KB"
    assert commands._human_size(1024 * 1024 * 2.5) == "2.5 MB"


def test_encrypt_then_decrypt(configured, docs, capsys):
    p = docs / "note.md"
    p.write_bytes(b"private note")

    assert run(configured, "encrypt", str(p)) == commands.EXIT_OK
    assert p.read_bytes().startswith(MAGIC_MARKER)
    assert "Sealed note.md" in capsys.readouterr().out

    assert run(configured, "decrypt", str(p)) == commands.EXIT_OK
    assert p.read_bytes() == b"private note"


def test_decrypt_plain_file_fails(configured, docs, capsys):
    p = docs / "plain.md"
    p.write_bytes(b"plain")

    assert run(configured, "decrypt", str(p)) == commands.EXIT_FAILED
    assert "not valid ciphertext" in capsys.readouterr().err
    assert p.read_bytes() == b"plain"


def test_partial_failure_still_processes_others(configured, docs):
    good = docs / "good.md"
    empty = docs / "empty.md"
    good.write_bytes(b"content")
    empty.write_bytes(b"")

    assert run(configured, "encrypt", str(empty), str(good)) == commands.EXIT_FAILED
    assert good.read_bytes().startswith(MAGIC_MARKER)


def test_decrypt_legacy_flag(configured, docs):
    from docseal.security import encrypt

    p = docs / "legacy.md"
    p.write_bytes(encrypt(b"old", KEY)[4:])
    assert run(configured, "decrypt", str(p)) == commands.EXIT_FAILED
    assert run(configured, "decrypt", "--legacy", str(p)) == commands.EXIT_OK
    assert p.read_bytes() == b"old"


def test_encrypt_without_key_is_usage_error(settings_path, docs, capsys):
    settings_path.write_text(json.dumps({"document_directory": str(docs)}), encoding="utf-8")
    p = docs / "a.md"
    p.write_bytes(b"data")

    assert run(settings_path, "encrypt", str(p)) == commands.EXIT_USAGE
    assert "No encryption key" in capsys.readouterr().err
    assert p.read_bytes() == b"data"


def test_list_json(configured, docs, capsys):
    (docs / "a.md").write_bytes(b"plain")
    (docs / "b.md").write_bytes(MAGIC_MARKER + b"\x00" * 16)

    assert run(configured, "list", "--json") == commands.EXIT_OK
    listed = json.loads(capsys.readouterr().out)
    assert [(d["name"], d["state"]) for d in listed] == [("a.md", "plain"), ("b.md", "sealed")]


def test_list_empty(configured, capsys):
    assert run(configured, "list") == commands.EXIT_OK
    assert "No documents" in capsys.readouterr().out


def test_set_key_argument(settings_path):
    assert run(settings_path, "set-key", KEY) == commands.EXIT_OK
    assert json.loads(settings_path.read_text(encoding="utf-8"))["encryption_key"] == KEY


def test_set_key_prompts(settings_path, monkeypatch):
    monkeypatch.setattr(commands.getpass, "getpass", lambda prompt="": KEY)
    assert run(settings_path, "set-key") == commands.EXIT_OK
    assert json.loads(settings_path.read_text(encoding="utf-8"))["encryption_key"] == KEY


def test_set_key_empty_rejected(settings_path, monkeypatch):
    monkeypatch.setattr(commands.getpass, "getpass", lambda prompt="": "")
    assert run(settings_path, "set-key") == commands.EXIT_USAGE
    assert not settings_path.exists()


def test_set_key_non_ascii_warns(settings_path, capsys):
    assert run(settings_path, "set-key", "é" * 48) == commands.EXIT_OK
    assert "non-ASCII" in capsys.readouterr().err


def test_generate_key(settings_path, monkeypatch):
    from docseal.security import generate_key_string

    monkeypatch.setattr(commands.getpass, "getpass", lambda prompt="": "s3cret")
    assert run(settings_path, "generate-key", "--username", "alice") == commands.EXIT_OK
    stored = json.loads(settings_path.read_text(encoding="utf-8"))["encryption_key"]
    assert stored == generate_key_string("alice", "s3cret")


def test_generate_key_blank_password(settings_path, monkeypatch):
    monkeypatch.setattr(commands.getpass, "getpass", lambda prompt="": "   ")
    assert run(settings_path, "generate-key", "--username", "alice") == commands.EXIT_USAGE


def test_set_dir(settings_path, docs, capsys):
    assert run(settings_path, "set-dir", str(docs)) == commands.EXIT_OK
    stored = json.loads(settings_path.read_text(encoding="utf-8"))
    assert stored["document_directory"] == str(docs)
    assert str(docs.resolve()) in capsys.readouterr().out


def test_invalid_settings_file(settings_path, capsys):
    settings_path.write_text("{oops", encoding="utf-8")
    assert run(settings_path, "list") == commands.EXIT_USAGE
    assert "Cannot read settings" in capsys.readouterr().err


def test_default_command_runs_tui(configured, monkeypatch):
    called = []

    def fake_tui(ctx):
        called.append(ctx)
        return commands.EXIT_OK

    monkeypatch.setattr(commands, "cmd_tui", fake_tui)
    assert run(configured) == commands.EXIT_OK
    assert len(called) == 1


def test_encrypt_with_unencodable_env_key_fails_cleanly(configured, docs, monkeypatch, capsys):
    monkeypatch.setenv(KEY_ENV, "\udcff" + KEY[1:])
    p = docs / "note.md"
    p.write_bytes(b"private note")

    assert run(configured, "encrypt", str(p)) == commands.EXIT_FAILED
    assert "not valid UTF-8" in capsys.readouterr().err
    assert p.read_bytes() == b"private note"


def test_encrypt_reports_marker_prefixed_plaintext(configured, docs, capsys):
    p = docs / "a.bin"
    content = MAGIC_MARKER + b"plain secret data"
    p.write_bytes(content)

    assert run(configured, "encrypt", str(p)) == commands.EXIT_FAILED
    captured = capsys.readouterr()
    assert "Sealed failed for" in captured.err
    assert "Sealed a.bin" not in captured.out
    assert p.read_bytes() == content
