"""
Input/Output utilities for gold standards, predictions and result tables.
"""

import csv
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd
import numpy as np

from ..exceptions import PredictionFormatError
from .logging import get_logger


logger = get_logger("io")


def _read_tsv_rows(filepath: Path) -> List[Tuple[str, ...]]:
    """
    Read a headerless TSV file into one tuple per line.

    Blank lines are kept as empty tuples so that row indexes match line
    numbers; trailing empty fields are dropped. The number of columns is
    the widest line of the file, so no line is truncated.
    """
    with open(filepath, "r") as f:
        num_fields = max((line.rstrip("\r\n").count("\t") + 1 for line in f), default=1)

    df = pd.read_csv(
        filepath,
        sep="\t",
        header=None,
        names=list(range(num_fields)),
        index_col=False,
        dtype=str,
        skip_blank_lines=False,
        keep_default_na=False,
        quoting=csv.QUOTE_NONE,
    )

    rows = []
    for values in df.itertuples(index=False, name=None):
        fields = ["" if pd.isna(v) else str(v).strip() for v in values]
        while fields and fields[-1] == "":
            fields.pop()
        rows.append(tuple(fields))

    return rows


def read_prediction_file(filepath: str | Path) -> List[Tuple[str, ...]]:
    """
    Read a network prediction (ranked list of edges).

    Each non-blank line must be ``source<TAB>target<TAB>confidence``;
    the order of the lines is the ranking.

    Parameters
    ----------
    filepath : str or Path
        Path to the prediction file.

    Returns
    -------
    list of tuple
        One tuple per line of the file, empty for blank lines.
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Prediction file not found: {filepath}")

    logger.info(f"Reading prediction {filepath}")

    try:
        return _read_tsv_rows(filepath)
    except pd.errors.EmptyDataError:
        logger.warning(f"Prediction file {filepath} is empty")
        return []
    except pd.errors.ParserError as e:
        raise PredictionFormatError(f"Malformed prediction file: {e}", source=filepath.name) from e


def read_gold_standard_table(filepath: str | Path) -> pd.DataFrame:
    """
    Read a DREAM-style gold standard.

    Lines are ``source<TAB>target`` or ``source<TAB>target<TAB>flag``;
    lines with flag 0 only declare their nodes.

    Parameters
    ----------
    filepath : str or Path
        Path to the gold standard file.

    Returns
    -------
    pd.DataFrame
        Columns source, target, is_edge.
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Gold standard file not found: {filepath}")

    logger.info(f"Reading gold standard {filepath}")

    records = []
    for line, fields in enumerate(_read_tsv_rows(filepath), start=1):
        if not fields:
            continue
        if len(fields) not in (2, 3):
            raise ValueError(f"{filepath.name}, line {line}: expected 2 or 3 fields, found {len(fields)}")

        is_edge = True
        if len(fields) == 3:
            try:
                is_edge = float(fields[2]) != 0
            except ValueError:
                raise ValueError(f"{filepath.name}, line {line}: invalid edge flag '{fields[2]}'")

        records.append({"source": fields[0], "target": fields[1], "is_edge": is_edge})

    return pd.DataFrame(records, columns=["source", "target", "is_edge"])


def write_table(
    data: pd.DataFrame | np.ndarray | Sequence,
    filepath: str | Path,
    header: bool = False,
    index: bool = False,
) -> Path:
    """
    Write a result table as TSV.

    Parameters
    ----------
    data : DataFrame, array or sequence
        Table to write. Arrays and sequences are written without header.
    filepath : str or Path
        Output file path.
    header : bool
        Whether to write the column names of a DataFrame.
    index : bool
        Whether to write row index.

    Returns
    -------
    Path
        The written file.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if not isinstance(data, pd.DataFrame):
        data = pd.DataFrame(np.asarray(data))
        header = False

    logger.info(f"Writing file {filepath}")
    data.to_csv(filepath, sep="\t", header=header, index=index)

    return filepath


def write_text(text: str, filepath: str | Path) -> Path:
    """Write plain text (reports, point strings)."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Writing file {filepath}")
    with open(filepath, "w") as f:
        f.write(text)

    return filepath


def result_path(output_dir: Optional[str | Path], *parts: str) -> Path:
    """Build ``<output_dir>/<part1>_<part2>...`` skipping empty parts."""
    name = "_".join(p for p in parts if p)
    return Path(output_dir or ".") / name
