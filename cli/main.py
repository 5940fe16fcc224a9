"""Command line entry point for XorNet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from xornet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "attempts": result.attempts,
        "accuracy": result.accuracy,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if getattr(result, "summary_path", ""):
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-relu-sigmoid",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument("--epochs", type=int, help="Epochs per training attempt")
    parser.add_argument("--lr", type=float, help="Learning rate shared by all layers")
    parser.add_argument(
        "--min-accuracy", type=float, help="Accuracy required to stop retrying"
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        help="Give up after this many attempts (default: retry until accurate)",
    )
    parser.add_argument("--seed", type=int, help="Seed for weight initialisation")
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--show-outputs",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print per-sample classifications after every attempt",
    )
    parser.add_argument(
        "--enable-plots", action="store_true", help="Enable plotting adapters"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, dict):
        raise TypeError(f"Config override {path.name} must decode to a mapping")
    return data


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = _load_override(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = _merge(config, override)

    train_cfg = config.setdefault("train", {})
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.lr is not None:
        train_cfg["lr"] = float(args.lr)
    if args.min_accuracy is not None:
        train_cfg["min_accuracy"] = float(args.min_accuracy)
    if args.max_attempts is not None:
        train_cfg["max_attempts"] = int(args.max_attempts)
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.show_outputs is not None:
        train_cfg["show_outputs"] = bool(args.show_outputs)
    if args.enable_plots:
        train_cfg["enable_plots"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
