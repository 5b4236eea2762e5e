#!/usr/bin/env python3
"""Tests for the ppa command line interface."""

import io
import os
import tempfile
from contextlib import redirect_stdout
from unittest import mock

from ppa.main import main
from ppa.models import Entry
from ppa.store import EncryptedStore


PASSWORD = "k" * 32


def run(store_path: str, argv: list, prompts: list) -> tuple[int, str]:
    """Run the CLI with canned password prompts; return (exit code, stdout)."""
    out = io.StringIO()
    with mock.patch("getpass.getpass", side_effect=prompts), redirect_stdout(out):
        try:
            main(["--store", store_path] + argv)
            assert False, "main() should always exit"
        except SystemExit as e:
            code = e.code
    return code, out.getvalue()


def test_cli_workflow():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, ".ppa.bin")

        code, out = run(path, ["init"], [PASSWORD])
        assert code == 0
        assert "Store created" in out

        code, out = run(path, ["init"], [PASSWORD])
        assert code == 0
        assert "Store already exists" in out

        code, out = run(path, ["search"], [PASSWORD])
        assert code == 0
        assert "Store is empty" in out

        code, out = run(
            path,
            ["add", "-n", "github", "-u", "alice", "-c", "work account"],
            [PASSWORD, "s3cr3t", "s3cr3t"],
        )
        assert code == 0
        assert "Entry added" in out
        assert EncryptedStore(path).load(PASSWORD) == [
            Entry("github", "alice", "s3cr3t", "work account")
        ]

        code, out = run(path, ["search", "gh"], [PASSWORD])
        assert code == 0
        assert "github" in out
        assert "alice" in out
        assert "s3cr3t" not in out

        code, out = run(path, ["search", "zzz"], [PASSWORD])
        assert code == 0
        assert "No matching entries" in out

        with mock.patch("pyperclip.copy") as copy:
            code, out = run(path, ["copy", "GITHUB", "password"], [PASSWORD])
        assert code == 0
        copy.assert_called_once_with("s3cr3t")

        code, out = run(path, ["remove", "GitHub"], [PASSWORD])
        assert code == 0
        assert "Entry removed" in out
        assert EncryptedStore(path).load(PASSWORD) == []

        code, out = run(path, ["remove", "github"], [PASSWORD])
        assert code == 0
        assert "Could not find matching entry" in out

        with mock.patch("pyperclip.copy") as copy:
            code, out = run(path, ["copy", "github", "username"], [PASSWORD])
        assert code == 0
        assert "Could not find matching entry" in out
        copy.assert_not_called()


def test_cli_add_password_mismatch():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, ".ppa.bin")
        run(path, ["init"], [PASSWORD])

        code, out = run(
            path,
            ["add", "-n", "github", "-u", "alice"],
            [PASSWORD, "one", "two"],
        )
        assert code == 1
        assert "do not match" in out
        assert EncryptedStore(path).load(PASSWORD) == []


def test_cli_errors():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, ".ppa.bin")

        code, out = run(path, ["search"], [PASSWORD])
        assert code == 1
        assert "ppa init" in out

        run(path, ["init"], [PASSWORD])
        code, out = run(path, ["search"], ["x" * 32])
        assert code == 1
        assert "Could not decrypt store" in out

        code, out = run(path, ["search"], ["short"])
        assert code == 1
        assert "32 bytes" in out
