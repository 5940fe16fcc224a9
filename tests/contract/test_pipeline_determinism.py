import json
from pathlib import Path

from xornet.training import pipelines


def _config(run_dir: Path) -> dict:
    config = json.loads(json.dumps(pipelines.load_preset("xor-relu-sigmoid")))
    config["train"].update(
        {
            "epochs": 15,
            "min_accuracy": 0.0,
            "max_attempts": 1,
            "seed": 11,
            "run_dir": str(run_dir),
        }
    )
    return config


def test_pipeline_produces_artifacts(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path / "run"))
    assert result.attempts == 1

    metrics = [
        json.loads(line)
        for line in Path(result.metrics_path).read_text().splitlines()
        if line
    ]
    epochs = [m for m in metrics if m["split"] == "train"]
    attempts = [m for m in metrics if m["split"] == "test"]
    assert [m["epoch"] for m in epochs] == list(range(1, 16))
    assert all(m["seed"] == 11 and "sha" in m for m in metrics)
    assert attempts[0]["accuracy"] == result.accuracy

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["train"]["seed"] == 11
    assert manifest["dataset"]["type"] == "xor"
    assert manifest["result"]["attempts"] == 1

    summary = json.loads(Path(result.summary_path).read_text())
    assert summary["attempts"] == 1
    assert set(summary["metrics"]) == {"train", "test"}
    assert (tmp_path / "run" / "attempts.csv").exists()
    assert (tmp_path / "run" / "config.json").exists()


def test_summary_keeps_epoch_and_attempt_series_apart(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path / "run"))
    summary = json.loads(Path(result.summary_path).read_text())

    train, test = summary["metrics"]["train"], summary["metrics"]["test"]
    for split in summary["metrics"].values():
        assert "epochs" not in split
    assert "epochs" not in summary["metrics"]
    assert train["loss"]["count"] == 15
    assert "accuracy" not in train
    assert test["loss"]["count"] == 1
    assert test["accuracy"]["last"] == result.accuracy
    assert train["loss"]["tail_window"] == 15
    assert test["loss"]["tail_window"] == 1


def test_pipeline_determinism(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "run1"))
    second = pipelines.run_pipeline(_config(tmp_path / "run2"))

    assert Path(first.metrics_path).read_text() == Path(second.metrics_path).read_text()
    assert Path(first.summary_path).read_bytes() == Path(second.summary_path).read_bytes()
