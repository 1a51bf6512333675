from __future__ import annotations

import io
import json
import os
import shutil
import stat

import pytest

from xpr_key_refresh.cli.main import main
from xpr_key_refresh.invoker import ProtonClient

pytestmark = pytest.mark.skipif(
    os.name != "posix" or shutil.which("sh") is None,
    reason="needs a POSIX shell to stand in for the proton client",
)

TX_ID = "ab" * 32


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    monkeypatch.delenv("XPR_KEY_REFRESH_CLIENT", raising=False)
    monkeypatch.delenv("XPR_KEY_REFRESH_EXPLORER_BASE", raising=False)


def _write_client(tmp_path, body: str):
    script = tmp_path / "proton"
    script.write_text(
        "#!/bin/sh\n"
        'printf \'%s\\n\' "$@" > "$(dirname "$0")/args.txt"\n' + body,
        encoding="utf-8",
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


def _json_block(text: str) -> dict:
    return json.loads(text.split("JSON Output:", 1)[1])


def test_real_client_success_with_undecodable_byte(tmp_path) -> None:
    script = _write_client(
        tmp_path,
        f"printf 'executed transaction\\ntransaction_id: {TX_ID}\\377\\n'\nexit 0\n",
    )
    out = io.StringIO()
    err = io.StringIO()

    rc = main(
        [
            "--config",
            str(tmp_path / "missing.toml"),
            "--client",
            str(script),
            "dcdoit",
            "PUB_K1_abc",
            "active",
        ],
        stdout=out,
        stderr=err,
    )

    assert rc == 0
    assert _json_block(out.getvalue()) == {
        "success": True,
        "account": "dcdoit",
        "permission": "active",
        "transactionId": TX_ID,
        "transactionLink": f"https://explorer.xprnetwork.org/transaction/{TX_ID}",
        "newPublicKey": "PUB_K1_abc",
    }
    received = (tmp_path / "args.txt").read_text(encoding="utf-8").splitlines()
    assert received[:3] == ["action", "eosio", "updateauth"]
    assert json.loads(received[3])["parent"] == "owner"
    assert received[4] == "dcdoit@active"


def test_real_client_nonzero_exit_reports_stderr(tmp_path) -> None:
    script = _write_client(tmp_path, "echo 'Missing required authority' >&2\nexit 1\n")
    out = io.StringIO()

    rc = main(
        [
            "--config",
            str(tmp_path / "missing.toml"),
            "--client",
            str(script),
            "dcdoit",
            "PUB_K1_abc",
            "owner",
        ],
        stdout=out,
        stderr=io.StringIO(),
    )

    assert rc == 1
    payload = _json_block(out.getvalue())
    assert payload["success"] is False
    assert "exit code 1" in payload["error"]
    assert payload["stderr"].strip() == "Missing required authority"
    received = (tmp_path / "args.txt").read_text(encoding="utf-8").splitlines()
    assert received[4] == "dcdoit@owner"


def test_run_decodes_lossy_output(tmp_path) -> None:
    script = _write_client(tmp_path, "printf 'ok \\377\\n'\nprintf 'warn \\376\\n' >&2\n")

    output = ProtonClient(binary=str(script)).run([str(script)])

    assert output.stdout == "ok \ufffd\n"
    assert output.stderr == "warn \ufffd\n"
