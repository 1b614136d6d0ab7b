# crypto_RecordBenchmark/loaders/csv_loader.py
from __future__ import annotations
from pathlib import Path
import io, logging, zipfile
import pandas as pd

from ..core.errors import RecordLoadError
from ..core.model import Record

_LOG = logging.getLogger(__name__)

def _input_options(cfg: dict | None) -> tuple[str, str]:
    inp = (cfg or {}).get("input") or {}
    return str(inp.get("delimiter", ",")), str(inp.get("encoding", "utf-8"))

# ---------- CSV -> records ----------
def _df_from_csv_bytes(buff: bytes, sep: str, encoding: str) -> pd.DataFrame:
    # every cell stays a string; empty cells stay "" rather than NaN
    return pd.read_csv(io.BytesIO(buff), sep=sep, encoding=encoding,
                       dtype=str, keep_default_na=False, na_filter=False)

def _records_from_df(df: pd.DataFrame) -> list[Record]:
    columns = [str(c) for c in df.columns]
    return [Record(tuple(zip(columns, row))) for row in df.itertuples(index=False, name=None)]

def _read_source(path: Path) -> bytes:
    if path.suffix.lower() != ".zip":
        return path.read_bytes()
    with zipfile.ZipFile(path, "r") as zf:
        members = sorted(m for m in zf.namelist() if m.lower().endswith(".csv"))
        if not members:
            raise RecordLoadError(f"{path.name}: archive contains no CSV member")
        if len(members) > 1:
            _LOG.info("%s: %d CSV members, using %s", path.name, len(members), members[0])
        return zf.read(members[0])

# ---------- public loader ----------
def load(path: Path, cfg: dict | None = None) -> list[Record]:
    """
    Accepts: a loose .csv file (header row required) or a .zip with CSV members.
    Returns: every row as a Record, in file order. Nothing is returned on failure.
    """
    sep, encoding = _input_options(cfg)
    try:
        df = _df_from_csv_bytes(_read_source(path), sep, encoding)
    except RecordLoadError:
        raise
    except (OSError, UnicodeDecodeError, zipfile.BadZipFile,
            pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise RecordLoadError(f"failed to load records from {path}: {e}") from e

    records = _records_from_df(df)
    _LOG.debug("loaded %d records with %d columns from %s", len(records), df.shape[1], path.name)
    return records
