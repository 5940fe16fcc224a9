"""Pipeline assembly: config -> dataset, layers, network, artifacts."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.matrix import GAUSSIAN_STD
from ..core.types import RunResult
from ..data import registry
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .layers import DEFAULT_LEARNING_RATE, DenseLayer
from .network import Network

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-relu-sigmoid": {
        "data": {"name": "xor", "options": {"low": -1.0, "high": 1.0}},
        "model": {
            "d_in": 2,
            "d_out": 2,
            "hidden": [3, 3],
            "activations": ["relu", "relu", "sigmoid"],
            "init_std": 0.02,
        },
        "train": {
            "epochs": 1000,
            "lr": 1.02,
            "min_accuracy": 0.98,
            "max_attempts": None,
            "seed": 0,
            "show_outputs": False,
            "run_dir": "runs/xor-relu-sigmoid",
            "enable_plots": False,
        },
    },
    "xor-sigmoid": {
        "data": {"name": "xor", "options": {"low": -1.0, "high": 1.0}},
        "model": {
            "d_in": 2,
            "d_out": 2,
            "hidden": [3],
            "activation": "sigmoid",
            "init_std": 0.02,
        },
        "train": {
            "epochs": 1000,
            "lr": 1.02,
            "min_accuracy": 0.98,
            "max_attempts": None,
            "seed": 0,
            "show_outputs": False,
            "run_dir": "runs/xor-sigmoid",
            "enable_plots": False,
        },
    },
    "xor-sigmoid-square": {
        "data": {"name": "xor", "options": {"low": -1.0, "high": 1.0}},
        "model": {
            "d_in": 2,
            "d_out": 2,
            "hidden": [2],
            "activation": "sigmoid",
            "init_std": 0.02,
        },
        "train": {
            "epochs": 1000,
            "lr": 1.02,
            "min_accuracy": 0.98,
            "max_attempts": None,
            "seed": 0,
            "show_outputs": False,
            "run_dir": "runs/xor-sigmoid-square",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[1] / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def _read_preset_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:
            raise RuntimeError("PyYAML is required to load preset files in YAML format") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported preset file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Preset {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = _read_preset_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(
                        f"Preset {file.name} is missing required sections: {missing_str}"
                    )
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    spec = registry.get_dataset(str(data_cfg["name"]), **data_cfg.get("options", {}))

    d_in = int(model_cfg.get("d_in", spec.d_in))
    d_out = int(model_cfg.get("d_out", spec.d_out))
    if spec.d_in != d_in:
        raise ValueError(f"Configured d_in={d_in} but dataset provides {spec.d_in}")
    if spec.d_out != d_out:
        raise ValueError(f"Configured d_out={d_out} but dataset provides {spec.d_out}")
    model_cfg["d_in"] = d_in
    model_cfg["d_out"] = d_out

    dims = _build_dims(model_cfg)
    activation_names = _build_activations(model_cfg, len(dims) - 1)

    seed = int(train_cfg.get("seed", 0))
    lr = float(train_cfg.get("lr", DEFAULT_LEARNING_RATE))
    epochs = int(train_cfg.get("epochs", 1000))
    min_accuracy = float(train_cfg.get("min_accuracy", 0.98))
    max_attempts = train_cfg.get("max_attempts")
    max_attempts = int(max_attempts) if max_attempts is not None else None
    show_outputs = bool(train_cfg.get("show_outputs", False))

    rng = np.random.default_rng(seed)
    init_std = float(model_cfg.get("init_std", GAUSSIAN_STD))
    layers = [
        DenseLayer(out_dim, in_dim, name, learning_rate=lr, rng=rng, init_std=init_std)
        for in_dim, out_dim, name in zip(dims[:-1], dims[1:], activation_names)
    ]

    run_dir = _resolve_run_dir(train_cfg, spec.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    metrics_sink = JsonlSink(run_dir / "metrics.jsonl", seed=seed)
    attempts_sink = CsvSink(run_dir / "attempts.csv")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    network = Network(
        spec.dataset,
        layers,
        epochs,
        show_outputs,
        callbacks=[metrics_sink, attempts_sink, plots],
    )
    description = network.describe()
    _print_startup_summary(
        dataset_name=spec.name,
        dims=description.layer_dims,
        activations=description.activations,
        epochs=epochs,
        lr=lr,
        min_accuracy=min_accuracy,
        max_attempts=max_attempts,
        param_count=description.parameter_count,
    )

    try:
        outcome = network.generate_model(min_accuracy, max_attempts=max_attempts)
    finally:
        plots.close()

    safe_config = _safe_config(config, model_cfg)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=spec.provenance,
        result={"attempts": outcome.attempts, "accuracy": outcome.accuracy, "loss": outcome.loss},
    )
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(metrics_sink.path, run_dir / "summary.json", tail=summary_tail)
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    return RunResult(
        attempts=outcome.attempts,
        accuracy=outcome.accuracy,
        metrics_path=str(metrics_sink.path),
        manifest_path=manifest,
        summary_path=str(summary_path),
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if train_cfg.get("run_dir"):
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _build_dims(model_cfg: Mapping[str, object]) -> List[int]:
    dims = [int(model_cfg.get("d_in", 2))]
    dims.extend(int(h) for h in model_cfg.get("hidden", []))
    dims.append(int(model_cfg.get("d_out", 2)))
    if any(d <= 0 for d in dims):
        raise ValueError(f"Layer dimensions must be positive, got {dims}")
    return dims


def _build_activations(model_cfg: Mapping[str, object], n_layers: int) -> List[str]:
    if "activations" in model_cfg:
        names = [str(name) for name in model_cfg["activations"]]  # type: ignore[union-attr]
        if len(names) != n_layers:
            raise ValueError(
                f"Expected {n_layers} activations (one per layer), got {len(names)}"
            )
        return names
    return [str(model_cfg.get("activation", "sigmoid"))] * n_layers


def _safe_config(
    config: Mapping[str, object], model_cfg: Mapping[str, object]
) -> Mapping[str, object]:
    copied = json.loads(json.dumps(config))
    copied.setdefault("model", {}).update({"d_in": model_cfg["d_in"], "d_out": model_cfg["d_out"]})
    return copied


def _print_startup_summary(
    *,
    dataset_name: str,
    dims: Sequence[int],
    activations: Sequence[str],
    epochs: int,
    lr: float,
    min_accuracy: float,
    max_attempts: int | None,
    param_count: int,
) -> None:
    print("=== XorNet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Dimensions    : {list(dims)}")
    print(f"Activations   : {list(activations)}")
    print(f"Epochs        : {epochs}")
    print(f"Learning rate : {lr}")
    print(f"Target acc.   : {min_accuracy}")
    print(f"Max attempts  : {max_attempts if max_attempts is not None else 'unbounded'}")
    print(f"Parameters    : {param_count}")
    print("==================")


__all__ = ["load_preset", "presets", "run_pipeline"]
