"""Command line entry point for DocSeal.

Usage examples:
    docseal set-dir notes/private
    docseal generate-key --username alice
    docseal encrypt notes/private/diary.md
    docseal decrypt notes/private/diary.md
    docseal list --json
    docseal tui
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from typing import List, Optional

from docseal.core.exceptions import DocSealError, KeyNotConfiguredError, SettingsError
from docseal.security import generate_key_string, is_ascii_key
from docseal.frontend.cli.context import AppContext, build_context
from docseal.frontend.cli.logging_config import configure_logging

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _human_size(num: float) -> str:
    # Simple human-readable bytes formatter.
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if num < 1024:
            return f"{num:.1f} {unit}" if unit != "B" else f"{num} B"
        num /= 1024
    return f"{num:.1f} PB"


def _run_on_paths(op, paths: List[str], verb: str) -> int:
    failed = 0
    for path in paths:
        try:
            doc = op(path)
        except KeyNotConfiguredError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return EXIT_USAGE
        except (DocSealError, OSError) as exc:
            failed += 1
            print(f"{verb} failed for {path}: {exc}", file=sys.stderr)
        else:
            print(f"{verb} {doc.name} ({doc.state.value}, {_human_size(doc.size)})")
    return EXIT_FAILED if failed else EXIT_OK


def cmd_encrypt(ctx: AppContext, paths: List[str]) -> int:
    return _run_on_paths(ctx.dm.seal, paths, "Sealed")


def cmd_decrypt(ctx: AppContext, paths: List[str], legacy: bool = False) -> int:
    return _run_on_paths(
        lambda p: ctx.dm.unseal(p, allow_legacy=legacy), paths, "Unsealed"
    )


def cmd_list(ctx: AppContext, as_json: bool = False) -> int:
    docs = ctx.dm.list_documents()
    if as_json:
        print(json.dumps([d.to_dict() for d in docs], indent=2))
        return EXIT_OK
    if not docs:
        print(f"No documents under {ctx.dm.document_root}")
        return EXIT_OK
    for d in docs:
        modified = d.modified_at.isoformat(timespec="seconds") if d.modified_at else "--"
        print(f"{d.state.value:<7} {_human_size(d.size):>10}  {modified}  {d.path}")
    return EXIT_OK


def cmd_set_key(ctx: AppContext, key: Optional[str]) -> int:
    if key is None:
        key = getpass.getpass("Encryption key: ")
    if not key:
        print("Error: key cannot be empty", file=sys.stderr)
        return EXIT_USAGE
    if not is_ascii_key(key):
        print(
            "Warning: key contains non-ASCII characters; derived key lengths may be invalid",
            file=sys.stderr,
        )
    ctx.set_key(key)
    print("Encryption key saved. Back it up: sealed documents cannot be recovered without it.")
    return EXIT_OK


def cmd_generate_key(ctx: AppContext, username: str) -> int:
    password = getpass.getpass("Password: ")
    try:
        key = generate_key_string(username, password)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    ctx.set_key(key)
    print("Generated a new encryption key from username and password.")
    return EXIT_OK


def cmd_set_dir(ctx: AppContext, directory: str) -> int:
    ctx.set_document_directory(directory)
    print(f"Document directory set to {ctx.dm.document_root}")
    return EXIT_OK


def cmd_tui(ctx: AppContext) -> int:  # pragma: no cover - interactive
    from docseal.frontend.cli.app import DocSealApp

    DocSealApp(ctx=ctx).run()
    return EXIT_OK


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docseal",
        description="Seal (encrypt) and unseal documents in place.",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Path to settings file (default: $DOCSEAL_SETTINGS or ~/.docseal/settings.json)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("encrypt", help="Seal documents in place")
    p.add_argument("paths", nargs="+")

    p = sub.add_parser("decrypt", help="Unseal documents in place")
    p.add_argument("paths", nargs="+")
    p.add_argument(
        "--legacy",
        action="store_true",
        help="Also accept marker-less ciphertext from the older format",
    )

    p = sub.add_parser("list", help="List managed documents")
    p.add_argument("--json", dest="as_json", action="store_true")

    p = sub.add_parser("set-key", help="Store the encryption key")
    p.add_argument("key", nargs="?", default=None, help="Key string (prompted if omitted)")

    p = sub.add_parser("generate-key", help="Derive a key from username and password")
    p.add_argument("--username", required=True)

    p = sub.add_parser("set-dir", help="Store the document directory")
    p.add_argument("directory")

    sub.add_parser("tui", help="Run the interactive document manager")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        ctx = build_context(args.settings)
    except SettingsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    command = args.command or "tui"
    if command == "encrypt":
        return cmd_encrypt(ctx, args.paths)
    if command == "decrypt":
        return cmd_decrypt(ctx, args.paths, legacy=args.legacy)
    if command == "list":
        return cmd_list(ctx, as_json=args.as_json)
    if command == "set-key":
        return cmd_set_key(ctx, args.key)
    if command == "generate-key":
        return cmd_generate_key(ctx, args.username)
    if command == "set-dir":
        return cmd_set_dir(ctx, args.directory)
    return cmd_tui(ctx)


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
