from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

TOKEN_SEPARATORS = re.compile(r"[\s,]+")

Row = tuple[Optional[float], ...]


@dataclass(frozen=True)
class ParseResult:
    """Numeric rows recovered from delimited text.

    ``column_count`` is the longest kept row; rows without a single valid
    number never reach ``rows``.
    """

    rows: tuple[Row, ...] = ()
    column_count: int = 0

    @property
    def empty(self) -> bool:
        return not self.rows

    def __len__(self) -> int:
        return len(self.rows)


def split_tokens(line: str) -> list[str]:
    return TOKEN_SEPARATORS.split(line.strip())


def parse_rows(text: str) -> ParseResult:
    """Parse whitespace/comma separated text into rows of optional floats.

    Unparseable cells become ``None``; lines with no number at all are
    dropped. Malformed text never raises, an empty result is the only signal.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected text, got {type(text).__name__}.")

    token_rows = [split_tokens(line) for line in text.splitlines() if line.strip()]
    if not token_rows:
        return ParseResult()

    # Ragged lines are padded with None, which coerces to NaN like any bad token.
    frame = pd.DataFrame(token_rows)
    values = frame.apply(pd.to_numeric, errors="coerce").to_numpy(dtype=float)
    present = ~np.isnan(values)

    rows: list[Row] = []
    column_count = 0
    for idx in np.flatnonzero(present.any(axis=1)):
        width = len(token_rows[idx])
        rows.append(
            tuple(
                float(v) if ok else None
                for v, ok in zip(values[idx, :width], present[idx, :width])
            )
        )
        column_count = max(column_count, width)

    return ParseResult(rows=tuple(rows), column_count=column_count)
