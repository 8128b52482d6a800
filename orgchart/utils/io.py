"""File I/O utilities for reading snapshots and writing chart outputs."""

import json
from pathlib import Path

import pandas as pd
from rich.console import Console

type FilePath = str | Path

console = Console()


def read_snapshot(path: FilePath, sheet_name: str | int = 0) -> pd.DataFrame:
    """Read one snapshot file with blank cells as ``''``.

    Spreadsheet cells come back as text so ids stay strings (no ``1001.0``).
    JSON keeps its native numbers.
    """
    path = Path(path)

    match path.suffix.lower():
        case ".csv":
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        case ".xlsx":
            df = pd.read_excel(path, sheet_name=sheet_name, dtype=str, engine="openpyxl").fillna("")
        case ".json":
            df = pd.read_json(path, orient="records", dtype=False).fillna("")
        case ext:
            raise ValueError(f"Unsupported snapshot format: {ext}")

    console.print(f"  Read {len(df)} rows from {path.name}")
    return df


def write_json(payload: dict | list, path: FilePath) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    console.print(f"  Wrote {path}")
    return path
