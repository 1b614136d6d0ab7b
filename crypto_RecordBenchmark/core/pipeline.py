# crypto_RecordBenchmark/core/pipeline.py
from __future__ import annotations
from pathlib import Path
from typing import Iterable, Sequence

from ..loaders import csv_loader
from .errors import ConfigError
from .matrix import matrix_from_config
from .model import BenchmarkResult, Record, ReportRow, TrialSpec
from .plotting import save_timing_plot
from .reports import REPORT_FORMATS, format_result_row, round_seconds, write_report, write_summary_report
from .runner import measure_encryption

DEFAULT_INPUT = "birth_records.csv"
DEFAULT_BASENAME = "encryption_benchmark_results"

def config_section(cfg: dict, name: str) -> dict:
    """Config section as a dict; a key left empty in YAML counts as absent."""
    sec = cfg.get(name) or {}
    if not isinstance(sec, dict):
        raise ConfigError(f"config section '{name}' must be a mapping")
    return sec

def run_trials(records: Sequence[Record],
               trials: Iterable[TrialSpec],
               verbose: bool = True) -> tuple[list[ReportRow], list[BenchmarkResult]]:
    """
    Run every trial in order and return (report rows, results without ciphertexts).
    Batch N is records[:N]. The first failure propagates and aborts the run.
    """
    rows: list[ReportRow] = []
    results: list[BenchmarkResult] = []
    last_size = last_algo = None

    for trial in trials:
        if verbose and trial.batch_size != last_size:
            if last_size is not None:
                print("=" * 46)
            print(f"\n[batch] testing {trial.batch_size} records")
            last_size, last_algo = trial.batch_size, None
        if verbose and trial.algorithm != last_algo:
            print(f"[algo] {trial.algorithm}")
            last_algo = trial.algorithm

        subset = records[:trial.batch_size]
        result = measure_encryption(subset, trial.key, trial.algorithm)
        rows.append(format_result_row(result, trial.batch_size))
        results.append(result.without_ciphertexts())

        if verbose:
            print(f"  [trial] key size: {result.key_length} bits, records: {trial.batch_size}, "
                  f"time: {round_seconds(result.time_s):.2f} s")

    if verbose and last_size is not None:
        print("=" * 46)
    return rows, results

def run_pipeline(cfg: dict, out_root: Path, input_path: Path | None = None) -> dict[str, Path]:
    """
    Load records, run the configured matrix, write report(s) once at the end.
    Returns the written outputs keyed by kind ("csv", "mat", "summary", "plot").
    """
    verbose = bool(config_section(cfg, "logging").get("verbose", True))
    in_path = input_path or Path(config_section(cfg, "input").get("path", DEFAULT_INPUT))
    matrix = matrix_from_config(cfg)

    out_cfg = config_section(cfg, "output")
    rep_cfg = config_section(cfg, "reports")
    plot_cfg = config_section(cfg, "plot")
    basename = str(out_cfg.get("basename", DEFAULT_BASENAME))
    fmt = str(rep_cfg.get("format", "csv")).lower()
    if fmt not in REPORT_FORMATS:
        raise ConfigError(f"reports.format must be one of {list(REPORT_FORMATS)}, got {fmt!r}")
    mat_var = str(rep_cfg.get("mat_variable", "report"))

    records = csv_loader.load(in_path, cfg)
    if verbose:
        print(f"[load] {len(records)} records from {in_path}")
        print(f"[matrix] {len(matrix)} trials: sizes={list(matrix.batch_sizes)} algorithms={list(matrix.algorithms)}")
        print("Encryption Performance Results:")

    rows, results = run_trials(records, matrix.iter_trials(), verbose=verbose)

    outputs: dict[str, Path] = {}
    for p in write_report(rows, out_root / basename, fmt=fmt, mat_variable=mat_var):
        outputs[p.suffix.lstrip(".")] = p

    if bool(rep_cfg.get("summary", True)):
        summary = write_summary_report(results, out_root / f"{basename}_summary")
        if summary is not None:
            outputs["summary"] = summary

    if bool(plot_cfg.get("enabled", False)):
        png = save_timing_plot(rows, out_root / str(plot_cfg.get("file_name", "encryption_time_vs_records.png")))
        if png is not None:
            outputs["plot"] = png

    return outputs
