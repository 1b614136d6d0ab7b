# crypto_RecordBenchmark/core/reports.py
from __future__ import annotations
from pathlib import Path
from typing import Literal, Sequence
import numpy as np
import pandas as pd
from scipy.io import savemat

from .errors import ReportWriteError
from .model import BenchmarkResult, ReportRow

ReportFormat = Literal["csv", "mat", "both"]
REPORT_FORMATS: tuple[str, ...] = ("csv", "mat", "both")

REPORT_COLUMNS: tuple[str, ...] = (
    "Algorithm", "Key Length (bits)", "Records", "Encryption Time (s)",
)
SUMMARY_COLUMNS: tuple[str, ...] = (
    "Algorithm", "Key Length (bits)", "Trials", "Total Records",
    "Total Time (s)", "Mean Time per Record (ms)",
)

def round_seconds(value: float) -> float:
    return round(float(value), 2)

def format_result_row(result: BenchmarkResult, batch_size: int) -> ReportRow:
    """Flatten one runner result into a report row; time rounded to 2 decimals."""
    return ReportRow(
        algorithm=result.algorithm,
        key_length=result.key_length,
        records=int(batch_size),
        encryption_time_s=round_seconds(result.time_s),
    )

def build_report_frame(rows: Sequence[ReportRow]) -> pd.DataFrame:
    data = [(r.algorithm, r.key_length, r.records, r.encryption_time_s) for r in rows]
    return pd.DataFrame(data, columns=list(REPORT_COLUMNS))

def build_summary_frame(results: Sequence[BenchmarkResult]) -> pd.DataFrame:
    """One row per (algorithm, key length): totals and mean cost per record."""
    if not results:
        return pd.DataFrame(columns=list(SUMMARY_COLUMNS))
    df = pd.DataFrame({
        "Algorithm": [r.algorithm for r in results],
        "Key Length (bits)": [r.key_length for r in results],
        "n": [r.n_records for r in results],
        "t": [r.time_s for r in results],
    })
    g = df.groupby(["Algorithm", "Key Length (bits)"], sort=False)
    out = g.agg(**{"Trials": ("n", "size"), "Total Records": ("n", "sum"), "Total Time (s)": ("t", "sum")})
    out = out.reset_index()
    totals = out["Total Records"].to_numpy(dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        per_rec_ms = np.where(totals > 0, out["Total Time (s)"].to_numpy(dtype=float) / totals * 1000.0, np.nan)
    out["Mean Time per Record (ms)"] = np.round(per_rec_ms, 6)
    out["Total Time (s)"] = out["Total Time (s)"].round(6)
    return out[list(SUMMARY_COLUMNS)]

def _write_csv(df_out: pd.DataFrame, out_csv: Path, title: str) -> Path:
    try:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        df_out.to_csv(out_csv, index=False, encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(f"could not write {title} to {out_csv}: {e}") from e
    print(f"[OK] wrote report: {title} → {out_csv}")
    return out_csv

def _to_mat_cellstr(seq: list[str]) -> np.ndarray:
    """Make a MATLAB column cell array from a list of strings."""
    arr = np.empty((len(seq), 1), dtype=object)
    arr[:, 0] = [("" if s is None else str(s)) for s in seq]
    return arr

def _write_mat(df_out: pd.DataFrame, out_mat: Path, varname: str, title: str) -> Path:
    """
    Save a MATLAB struct with one field per report column.
    Algorithm names become a cell array (Nx1), numerics become double (Nx1).
    """
    def numcol(name: str) -> np.ndarray:
        return df_out[name].to_numpy(dtype=float).reshape(-1, 1)

    mat_struct = {
        "algorithm":         _to_mat_cellstr(df_out["Algorithm"].astype(str).tolist()),
        "key_length_bits":   numcol("Key Length (bits)"),
        "records":           numcol("Records"),
        "encryption_time_s": numcol("Encryption Time (s)"),
    }
    try:
        out_mat.parent.mkdir(parents=True, exist_ok=True)
        savemat(out_mat, {varname: mat_struct})
    except OSError as e:
        raise ReportWriteError(f"could not write {title} to {out_mat}: {e}") from e
    print(f"[OK] wrote report: {title} → {out_mat}")
    return out_mat

def write_report(rows: Sequence[ReportRow],
                 out_base: Path,
                 fmt: ReportFormat = "csv",
                 mat_variable: str = "report",
                 title: str = "encryption benchmark") -> list[Path]:
    """
    Write the trial rows in the requested format, replacing existing files.
    - out_base is a *base path without extension*
    - fmt: "csv" | "mat" | "both"
    """
    if fmt not in REPORT_FORMATS:
        raise ValueError(f"unknown report format: {fmt!r}")
    df_out = build_report_frame(rows)
    written: list[Path] = []
    if fmt in ("csv", "both"):
        written.append(_write_csv(df_out, out_base.with_suffix(".csv"), title))
    if fmt in ("mat", "both"):
        written.append(_write_mat(df_out, out_base.with_suffix(".mat"), mat_variable, title))
    return written

def write_summary_report(results: Sequence[BenchmarkResult], out_base: Path,
                         title: str = "encryption summary") -> Path | None:
    if not results:
        return None
    return _write_csv(build_summary_frame(results), out_base.with_suffix(".csv"), title)
