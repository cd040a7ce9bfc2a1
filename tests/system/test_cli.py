from __future__ import annotations

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from thermalcore.cli import main


def test_cli_writes_artifacts(capsys):
    with TemporaryDirectory() as td:
        out_dir = Path(td).joinpath("cli_run")

        rc = main(["--name", "cli", "--ticks", "30", "--sample-every", "3", "--out-dir", str(out_dir)])

        assert rc == 0
        data = json.loads(out_dir.joinpath("metrics.json").read_text(encoding="utf-8"))
        assert data["run"]["total_ticks"] == 30
        assert data["run"]["total_samples"] == 10
        assert out_dir.joinpath("telemetry.json").exists()

    out = capsys.readouterr().out
    assert out.startswith("cli: ticks=30 ")
    assert "status=OPTIMAL" in out
    assert "flags=" not in out


def test_cli_flags_and_inputs(capsys):
    with TemporaryDirectory() as td:
        rc = main([
            "--name", "chaos",
            "--ticks", "10",
            "--cooling", "AIO",
            "--material", "COPPER",
            "--enable", "quantum",
            "--enable", "fusion",
            "--no-reality-anchor",
            "--out-dir", td,
        ])

    assert rc == 0
    out = capsys.readouterr().out
    assert "flags=fusion,quantum,reality_anchor" in out


def test_cli_scenario(capsys):
    with TemporaryDirectory() as td:
        rc = main(["--name", "stress", "--scenario", "stress", "--ticks", "300", "--out-dir", td])

    assert rc == 0
    assert "status=THROTTLING" in capsys.readouterr().out


def test_cli_rejects_bad_ticks():
    with TemporaryDirectory() as td:
        with pytest.raises(SystemExit) as exc:
            main(["--ticks", "-1", "--out-dir", td])
    assert exc.value.code == 2


def test_cli_rejects_unknown_cooling():
    with pytest.raises(SystemExit):
        main(["--cooling", "PLASMA"])
