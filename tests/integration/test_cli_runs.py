import json
from pathlib import Path

import pytest

from cli.main import main


def test_cli_quick_run(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(
        [
            "--preset",
            "xor-relu-sigmoid",
            "--epochs",
            "5",
            "--min-accuracy",
            "0",
            "--max-attempts",
            "1",
            "--seed",
            "3",
        ]
    )
    run_dir = Path("runs/xor-relu-sigmoid")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["attempts"] == 1


def test_cli_config_override_and_dump(tmp_path, capsys):
    override = tmp_path / "override.json"
    override.write_text(json.dumps({"train": {"epochs": 3, "min_accuracy": 0.0}}))
    dumped = tmp_path / "resolved.json"
    main(
        [
            "--preset",
            "xor-sigmoid",
            "--config",
            str(override),
            "--max-attempts",
            "1",
            "--run-dir",
            str(tmp_path / "run"),
            "--show-outputs",
            "--dump-config",
            str(dumped),
        ]
    )
    resolved = json.loads(dumped.read_text())
    assert resolved["train"]["epochs"] == 3
    assert resolved["train"]["lr"] == 1.02
    assert resolved["train"]["show_outputs"] is True
    assert "Training round: 1" in capsys.readouterr().out


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    listed = capsys.readouterr().out.split()
    assert "xor-relu-sigmoid" in listed
    assert "xor-tanh" in listed


def test_cli_empty_yaml_override_keeps_preset(tmp_path):
    override = tmp_path / "empty.yaml"
    override.write_text("")
    dumped = tmp_path / "resolved.json"
    main(
        [
            "--preset",
            "xor-sigmoid",
            "--config",
            str(override),
            "--epochs",
            "2",
            "--min-accuracy",
            "0",
            "--max-attempts",
            "1",
            "--run-dir",
            str(tmp_path / "run"),
            "--dump-config",
            str(dumped),
        ]
    )
    resolved = json.loads(dumped.read_text())
    assert resolved["model"]["hidden"] == [3]
    assert resolved["train"]["epochs"] == 2


def test_cli_rejects_non_mapping_override(tmp_path):
    override = tmp_path / "list.yaml"
    override.write_text("- 1\n- 2\n")
    with pytest.raises(TypeError, match="mapping"):
        main(["--config", str(override), "--run-dir", str(tmp_path / "run")])
