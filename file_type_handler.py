import csv
import logging
import os

import pandas as pd


logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class StorageIOError(StorageError):
    pass


class StorageParseError(StorageError):
    pass


def _record_widths(path) -> list[int]:
    """Field count of every non-blank record."""
    with open(path, newline="", encoding="utf-8") as f:
        return [len(record) for record in csv.reader(f) if record]


def _trim_missing(values, width: int) -> list[str]:
    # pandas fills fields a short record lacks; they are not cells
    cells = list(values)[:width]
    while cells and pd.isna(cells[-1]):
        cells.pop()
    return ["" if pd.isna(v) else str(v) for v in cells]


class FileTypeHandler:
    """Reads and writes the table as CSV.

    The first record is the header row. Records shorter than the header
    stay ragged in memory; pandas rejects records longer than the first.
    """

    def __init__(self, path: str):
        self.path = path

    @property
    def backup_path(self) -> str:
        return self.path + ".temp"

    def load(self) -> tuple[list[str], list[list[str]]]:
        try:
            df = pd.read_csv(
                self.path,
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
            widths = _record_widths(self.path)
        except FileNotFoundError as e:
            raise StorageIOError(f"error opening file {self.path}: {e}") from e
        except pd.errors.EmptyDataError as e:
            raise StorageParseError("CSV file is empty") from e
        except (pd.errors.ParserError, csv.Error, UnicodeDecodeError) as e:
            raise StorageParseError(f"error reading CSV file: {e}") from e
        except OSError as e:
            raise StorageIOError(f"error opening file {self.path}: {e}") from e

        if df.empty:
            raise StorageParseError("CSV file is empty")

        if len(widths) != len(df):
            logger.warning(
                "Record count mismatch in %s (%d vs %d); keeping all fields",
                self.path, len(widths), len(df),
            )
            widths = [df.shape[1]] * len(df)

        records = [
            _trim_missing(values, width)
            for values, width in zip(df.itertuples(index=False, name=None), widths)
        ]
        headers, rows = records[0], records[1:]
        logger.info("Read %s: %d columns, %d rows", self.path, len(headers), len(rows))
        return headers, rows

    def save(self, headers, rows) -> None:
        records = [list(headers)] + [list(row) for row in rows]
        width = max(len(r) for r in records)
        padded = [r + [""] * (width - len(r)) for r in records]
        df = pd.DataFrame(padded)
        try:
            df.to_csv(
                self.path,
                index=False,
                header=False,
                lineterminator="\n",
            )
        except OSError as e:
            raise StorageIOError(f"error creating file {self.path}: {e}") from e
        logger.info("Wrote %s: %d rows", self.path, len(rows))

    def remove_backup(self) -> None:
        try:
            os.remove(self.backup_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove backup %s: %s", self.backup_path, e)
