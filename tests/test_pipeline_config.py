import json
from pathlib import Path

import pytest

from xornet.training import pipelines


def _quick(config: dict, tmp_path) -> dict:
    config = json.loads(json.dumps(config))
    config["train"].update(
        {"epochs": 2, "min_accuracy": 0.0, "max_attempts": 1, "run_dir": str(tmp_path)}
    )
    return config


def test_presets_include_builtin_and_file_presets():
    names = set(pipelines.presets())
    assert {"xor-relu-sigmoid", "xor-sigmoid", "xor-sigmoid-square", "xor-tanh"} <= names
    tanh = pipelines.load_preset("xor-tanh")
    assert tanh["model"]["activations"] == ["tanh", "sigmoid"]
    with pytest.raises(KeyError, match="Unknown preset"):
        pipelines.load_preset("mnist")


def test_file_presets_ship_inside_the_package():
    package_root = Path(pipelines.__file__).resolve().parents[1]
    assert pipelines._PRESET_DIR.parent == package_root
    assert (pipelines._PRESET_DIR / "xor-tanh.yaml").is_file()


def test_loaded_presets_are_independent_copies():
    first = pipelines.load_preset("xor-sigmoid")
    first["train"]["epochs"] = 1
    assert pipelines.load_preset("xor-sigmoid")["train"]["epochs"] == 1000


@pytest.mark.parametrize("name", ["xor-sigmoid", "xor-sigmoid-square", "xor-tanh"])
def test_alternative_architectures_run(tmp_path, name):
    result = pipelines.run_pipeline(_quick(pipelines.load_preset(name), tmp_path))
    assert result.attempts == 1


def test_dimensions_inferred_from_dataset(tmp_path, capsys):
    config = _quick(pipelines.load_preset("xor-sigmoid"), tmp_path)
    del config["model"]["d_in"]
    del config["model"]["d_out"]
    pipelines.run_pipeline(config)
    out = capsys.readouterr().out
    assert "Dimensions    : [2, 3, 2]" in out
    stored = json.loads((tmp_path / "config.json").read_text())
    assert stored["model"]["d_in"] == 2


def test_mismatched_input_dimension_rejected(tmp_path):
    config = _quick(pipelines.load_preset("xor-sigmoid"), tmp_path)
    config["model"]["d_in"] = 3
    with pytest.raises(ValueError, match="d_in"):
        pipelines.run_pipeline(config)


def test_activation_count_must_match_layers(tmp_path):
    config = _quick(pipelines.load_preset("xor-relu-sigmoid"), tmp_path)
    config["model"]["activations"] = ["relu", "sigmoid"]
    with pytest.raises(ValueError, match="one per layer"):
        pipelines.run_pipeline(config)


def test_unknown_activation_rejected(tmp_path):
    config = _quick(pipelines.load_preset("xor-sigmoid"), tmp_path)
    config["model"]["activation"] = "softplus"
    with pytest.raises(KeyError, match="softplus"):
        pipelines.run_pipeline(config)


def test_enable_plots_writes_loss_curve(tmp_path):
    config = _quick(pipelines.load_preset("xor-sigmoid-square"), tmp_path)
    config["train"]["enable_plots"] = True
    pipelines.run_pipeline(config)
    assert (tmp_path / "loss.png").exists()
