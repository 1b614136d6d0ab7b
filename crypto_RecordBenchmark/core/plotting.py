# crypto_RecordBenchmark/core/plotting.py
from __future__ import annotations
from pathlib import Path
from typing import Sequence
import matplotlib.pyplot as plt

from .model import ReportRow

def save_timing_plot(rows: Sequence[ReportRow], out_path: Path, title: str = "Encryption time vs records") -> Path | None:
    """One line per (algorithm, key length): encryption time over batch size."""
    if not rows:
        print("[INFO] no trial rows; skipping timing plot.")
        return None
    out_path.parent.mkdir(parents=True, exist_ok=True)

    series: dict[str, list[tuple[int, float]]] = {}
    for r in rows:
        series.setdefault(f"{r.algorithm} ({r.key_length} bit)", []).append((r.records, r.encryption_time_s))

    plt.figure(figsize=(11, 6))
    for label, pts in series.items():
        pts = sorted(pts)
        plt.plot([p[0] for p in pts], [p[1] for p in pts], marker="o", label=label)
    plt.xlabel("Records")
    plt.ylabel("Encryption Time [s]")
    plt.title(title)
    plt.grid(True, alpha=0.3)
    plt.legend(
        fontsize=8,
        ncol=4,
        loc="upper center",
        bbox_to_anchor=(0.5, -0.12),
        frameon=False,
    )
    plt.tight_layout(rect=[0, 0.12, 1, 1])
    plt.savefig(out_path, dpi=160)
    plt.close()
    print(f"[OK] timing plot: {len(series)} series → {out_path}")
    return out_path
