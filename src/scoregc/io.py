"""
Reading and writing per-factor value tables.

A value table holds one observation per line, factor id and value separated
by a single tab::

    M00001\t0.873
    M00001\t0.912
    M00002\t1.5

There is no header and no record count; the end of the stream is the end of
the table.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Tuple, Union

import pandas as pd

from scoregc.errors import FormatError, ValidationError, ValueTableIOError
from scoregc.models import FactorValues

PathRef = Union[str, os.PathLike]
Row = Tuple[str, float]

FORMATS = ("values",)
_MODES = {"r": "r", "read": "r", "w": "w", "write": "w", "a": "a", "append": "a"}

logger = logging.getLogger(__name__)


def format_row(factor_id: str, value: float) -> str:
    """Serialize one observation as ``"{factor_id}\\t{value}\\n"``."""
    factor_id = str(factor_id)
    if "\t" in factor_id or "\n" in factor_id or "\r" in factor_id:
        raise ValidationError(f"Factor id must not contain tabs or line breaks: {factor_id!r}")
    return f"{factor_id}\t{value}\n"


def parse_row(line: str, line_number: Optional[int] = None) -> Row:
    """Parse one table line into ``(factor_id, value)``."""
    text = line.rstrip("\r\n")
    factor_id, sep, raw_value = text.partition("\t")
    if not sep:
        raise FormatError("missing tab separator", line_number, line)
    try:
        value = float(raw_value)
    except ValueError:
        raise FormatError(f"non-numeric value {raw_value!r}", line_number, line) from None
    return factor_id, value


class ValueTableIO:
    """
    Value table reader/writer bound to one text stream.

    Parameters
    ----------
    path : str or path-like, optional
        File to open. The handle owns the stream and closes it.
    stream : text stream, optional
        Already open stream. It is never closed by this object.
    mode : str
        'r', 'w' or 'a' (or 'read', 'write', 'append').
    fmt : str
        Serialization format; only 'values' is recognized.

    Exactly one of ``path`` and ``stream`` must be given.
    """

    def __init__(
        self,
        path: Optional[PathRef] = None,
        stream: Optional[IO[str]] = None,
        mode: str = "r",
        fmt: Optional[str] = "values",
    ):
        if path is not None and stream is not None:
            raise ValueTableIOError("Must provide either a file name or a stream, not both")
        if path is None and stream is None:
            raise ValueTableIOError("Must provide either a file name or a stream")
        if not fmt:
            raise ValueTableIOError("Must provide a file format")
        if mode not in _MODES:
            raise ValueTableIOError(f"Unknown mode: {mode!r}. Available: {sorted(_MODES)}")

        self.path = Path(path) if path is not None else None
        self.mode = _MODES[mode]
        self.fmt = fmt
        self.owns_stream = path is not None
        if self.owns_stream:
            self._stream: Optional[IO[str]] = open(self.path, self.mode, encoding="utf-8", newline="")
            logger.debug(f"Opened value table {self.path} in mode {self.mode!r}")
        else:
            self._stream = stream

    def __enter__(self) -> "ValueTableIO":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def stream(self) -> Optional[IO[str]]:
        return self._stream

    @property
    def closed(self) -> bool:
        return self._stream is None

    def close(self) -> None:
        """Release the stream; closes it only when it was opened from a path."""
        if self._stream is None:
            return
        if self.owns_stream:
            self._stream.close()
            logger.debug(f"Closed value table {self.path}")
        self._stream = None

    def _check_format(self) -> None:
        if str(self.fmt).lower() not in FORMATS:
            raise ValueTableIOError(f"Unknown value table format: {self.fmt!r}. Available: {list(FORMATS)}")

    def _check_open(self, writable: bool) -> IO[str]:
        if self._stream is None:
            raise ValueTableIOError("Stream is no longer valid")
        if writable and self.mode not in ("w", "a"):
            raise ValueTableIOError("Stream is not open for writing")
        if not writable and self.mode != "r":
            raise ValueTableIOError("Stream is not open for reading")
        self._check_format()
        return self._stream

    def write_rows(self, rows: Iterable[Row]) -> int:
        """Append one line per ``(factor_id, value)`` row; return the number written."""
        stream = self._check_open(writable=True)
        count = 0
        for factor_id, value in rows:
            stream.write(format_row(factor_id, value))
            count += 1
        return count

    def write_values(self, values: FactorValues, factor_id: Optional[str] = None) -> int:
        """Write every observation in ``values``, or only those of ``factor_id``."""
        if values is None:
            raise ValidationError("No values provided")
        if factor_id is None and not len(values):
            logger.warning("No factor ids in values, nothing written")
        return self.write_rows(values.rows(factor_id))

    def read_rows(self) -> Iterator[Row]:
        """
        Return a lazy, single-pass iterator over the table rows.

        Blank lines are skipped. A malformed line raises
        :class:`~scoregc.errors.FormatError` when it is reached.
        """
        stream = self._check_open(writable=False)
        return self._iter_rows(stream)

    @staticmethod
    def _iter_rows(stream: IO[str]) -> Iterator[Row]:
        for line_number, line in enumerate(stream, start=1):
            if not line.strip():
                continue
            yield parse_row(line, line_number)

    def read_values(self) -> FactorValues:
        """Read the remaining rows into a :class:`FactorValues`."""
        return FactorValues(self.read_rows())


def write_value_table(values: FactorValues, path: PathRef, append: bool = False) -> int:
    """Write ``values`` to ``path``; return the number of rows written."""
    with ValueTableIO(path=path, mode="a" if append else "w") as table:
        return table.write_values(values)


def read_value_table(path: PathRef) -> FactorValues:
    """Read a value table file into a :class:`FactorValues`."""
    with ValueTableIO(path=path, mode="r") as table:
        return table.read_values()


def load_value_frame(path: PathRef) -> pd.DataFrame:
    """Read a value table file into a DataFrame with ``factor_id`` and ``value`` columns."""
    with ValueTableIO(path=path, mode="r") as table:
        rows = list(table.read_rows())
    frame = pd.DataFrame.from_records(rows, columns=["factor_id", "value"])
    return frame.astype({"factor_id": str, "value": "float64"})
