# -*- coding: utf-8 -*-
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pandas as pd

from stagecap.core.errors import ConfigurationError


# ---- Helpers básicos ---------------------------------------------------------
def require_columns(df: pd.DataFrame, cols: Iterable[str], name: str = "DataFrame") -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ConfigurationError(f"[{name}] Missing columns: {missing}. Present: {list(df.columns)}")


def read_csv_file(path: str | Path, name: str) -> pd.DataFrame:
    """``pd.read_csv`` with missing, empty or malformed files reported as configuration errors."""
    p = Path(path)
    if not p.is_file():
        raise ConfigurationError(f"[{name}] File not found: {p}")
    try:
        return pd.read_csv(p)
    except pd.errors.EmptyDataError:
        raise ConfigurationError(f"[{name}] File is empty: {p}") from None
    except pd.errors.ParserError as exc:
        raise ConfigurationError(f"[{name}] Cannot parse {p}: {exc}") from exc


def read_table(path: str | Path, name: str) -> pd.DataFrame:
    """CSV with stripped, lower-cased headers; a missing file is a configuration error."""
    df = read_csv_file(path, name)
    df.columns = [str(c).strip().lower() for c in df.columns]
    return df


def coerce_numeric(df: pd.DataFrame, cols: Iterable[str], name: str) -> pd.DataFrame:
    """Convert ``cols`` to float, naming the first offending row if a cell is not numeric."""
    out = df.copy()
    for c in cols:
        if c not in out.columns:
            continue
        converted = pd.to_numeric(out[c], errors="coerce")
        bad = converted.isna() & out[c].notna()
        if bad.any():
            row = int(bad.idxmax())
            raise ConfigurationError(
                f"[{name}] Non-numeric value {out.at[row, c]!r} in column '{c}' (row {row + 2})."
            )
        out[c] = converted.astype(float)
    return out


def coerce_int(df: pd.DataFrame, cols: Iterable[str], name: str) -> pd.DataFrame:
    out = coerce_numeric(df, cols, name)
    for c in cols:
        if c not in out.columns:
            continue
        if out[c].isna().any():
            raise ConfigurationError(f"[{name}] Empty value in integer column '{c}'.")
        if ((out[c] % 1) != 0).any():
            raise ConfigurationError(f"[{name}] Non-integer value in column '{c}'.")
        out[c] = out[c].astype(int)
    return out


def series_values(df: pd.DataFrame, col: str, name: str) -> List[float]:
    """Numeric column as a time series, one value per row.

    Blank cells after the last value are padding from a longer neighbouring
    column and are dropped. A blank cell followed by data is an error.
    """
    values = coerce_numeric(df[[col]], [col], name)[col].reset_index(drop=True)
    filled = values.notna()
    if not filled.any():
        return []
    last = int(filled[::-1].idxmax())
    gaps = values.iloc[: last + 1].isna()
    if gaps.any():
        row = int(gaps.idxmax())
        raise ConfigurationError(f"[{name}] Empty value in column '{col}' (row {row + 2}).")
    return values.iloc[: last + 1].astype(float).tolist()


def clean_names(series: pd.Series, name: str = "DataFrame") -> List[str]:
    """Stripped string labels; a blank cell is rejected instead of becoming ``"nan"``."""
    blank = series.isna()
    if blank.any():
        row = int(blank.reset_index(drop=True).idxmax())
        raise ConfigurationError(f"[{name}] Empty value in column '{series.name}' (row {row + 2}).")
    return series.astype(str).str.strip().tolist()
