# crypto_RecordBenchmark/main.py
from __future__ import annotations
from pathlib import Path
import logging
import yaml

from crypto_RecordBenchmark.core.errors import ConfigError
from crypto_RecordBenchmark.core.pipeline import config_section, run_pipeline

def load_config(cfg_path: Path) -> dict:
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {cfg_path}: {e}") from e
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"{cfg_path}: top level must be a mapping")
    return cfg

def _run(cfg_path: Path) -> None:
    # ---------- config ----------
    cfg = load_config(cfg_path)

    log_cfg = config_section(cfg, "logging")
    logging.basicConfig(level=str(log_cfg.get("level", "WARNING")).upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    verbose = bool(log_cfg.get("verbose", True))

    in_path = Path(config_section(cfg, "input").get("path", "birth_records.csv")).resolve()
    out_root = Path(config_section(cfg, "output").get("root", ".")).resolve()
    if verbose:
        print(f"[cfg] input={in_path}")
        print(f"[cfg] output={out_root}")

    # ---------- run ----------
    outputs = run_pipeline(cfg, out_root, input_path=in_path)
    if verbose:
        print(f"\n[summary] results have been exported to {outputs.get('csv') or outputs.get('mat')}")

def main(cfg_path: Path | None = None) -> None:
    here = Path(__file__).resolve().parent
    try:
        _run(cfg_path or here / "config.yaml")
    except Exception as e:
        print(f"[ERROR] benchmark run failed: {e}")
        raise

if __name__ == "__main__":
    main()
