"""Row extraction from delimited statement text."""

import csv
import os
from typing import List, TextIO, Union

from statement_summary.config.settings import CSV_ENCODING
from statement_summary.utils.exceptions import MalformedInputError, RetrievalError
from statement_summary.utils.logger import get_logger

StatementSource = Union[str, os.PathLike, TextIO]


class RowExtractor:
    """Reads raw CSV rows from a statement and drops the header row."""

    def __init__(self, delimiter: str = ",", encoding: str = CSV_ENCODING) -> None:
        """Initialize row extractor.

        Args:
            delimiter: Field delimiter.
            encoding: Text encoding used when the source is a path.
        """
        self.logger = get_logger(__name__)
        self.delimiter = delimiter
        self.encoding = encoding

    def extract_rows(self, source: StatementSource) -> List[List[str]]:
        """Read every row of a statement except the first (header) row.

        Blank lines are skipped. A source with zero rows and one that holds
        only a header both yield an empty list.

        Args:
            source: Path to a CSV file or an open text stream.

        Returns:
            Data rows in source order, each a list of string fields.

        Raises:
            RetrievalError: If a path source cannot be opened or read.
            MalformedInputError: If the text cannot be tokenized as CSV.
        """
        if isinstance(source, (str, os.PathLike)):
            try:
                with open(source, "r", encoding=self.encoding, newline="") as handle:
                    rows = self._read_all(handle)
            except OSError as e:
                raise RetrievalError(f"Cannot read statement {source}: {str(e)}") from e
        else:
            rows = self._read_all(source)

        data_rows = rows[1:]
        self.logger.debug(f"Extracted {len(data_rows)} data rows")
        return data_rows

    def _read_all(self, stream: TextIO) -> List[List[str]]:
        reader = csv.reader(stream, delimiter=self.delimiter, strict=True)
        try:
            return [row for row in reader if row]
        except csv.Error as e:
            raise MalformedInputError(f"Invalid CSV near line {reader.line_num}: {str(e)}") from e
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Statement is not valid {self.encoding} text: {str(e)}") from e
