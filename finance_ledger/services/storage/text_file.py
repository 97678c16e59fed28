"""
Text File Storage Implementation

The durable copy of the ledger is one flat UTF-8 text file (users.txt
by default), rewritten wholesale after every change.

TRADEOFFS:
- Exactly one process may use the file; there is no locking
- Every save rewrites every profile (fine for personal ledgers)

A file holding non-UTF-8 lines is still loaded: those lines are read as
Latin-1 instead of failing the whole load.

Writes go to a sibling .tmp file that then replaces the real file, so a
failed save leaves the previous copy intact.
"""

import contextlib
import os
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_ledger.config import get_settings
from finance_ledger.ledger.registry import UserProfileRegistry
from finance_ledger.models.outcome import ErrorKind, LedgerError, Outcome
from finance_ledger.services.storage.codec import DecodedLedger, deserialize, serialize
from finance_ledger.services.storage.interface import LedgerStorageInterface


logger = structlog.get_logger(__name__)

# Single-byte encoding assumed for lines that are not valid UTF-8
LEGACY_ENCODING = "latin-1"


class TextFileLedgerStorage(LedgerStorageInterface):
    """Ledger storage backed by the flat text file."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path) if path is not None else Path(get_settings().data_file)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def load(self) -> Outcome[DecodedLedger]:
        """Read and decode the file; a missing file is an empty ledger."""
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            logger.info("ledger_file_missing", path=self.location)
            return Outcome.ok(DecodedLedger())
        except OSError as e:
            logger.error("ledger_load_failed", path=self.location, error=str(e))
            return Outcome.fail(ErrorKind.IO_ERROR, f"Could not read {self.location}: {e}")

        return Outcome.ok(deserialize(self._decode(raw)))

    def save(self, registry: UserProfileRegistry) -> Outcome[None]:
        try:
            text = serialize(registry)
        except LedgerError as e:
            logger.error("ledger_save_refused", path=self.location, error=str(e))
            return Outcome.fail(e.kind, str(e))

        try:
            self._write(text)
        except OSError as e:
            logger.error("ledger_save_failed", path=self.location, error=str(e))
            return Outcome.fail(ErrorKind.IO_ERROR, f"Could not write {self.location}: {e}")

        logger.debug("ledger_saved", path=self.location, profiles=len(registry))
        return Outcome.ok()

    def _decode(self, raw: bytes) -> str:
        """
        Decode the file as UTF-8.

        Files written by older tools may hold single-byte (Latin-1) text.
        Only the lines that are not valid UTF-8 are read as Latin-1, so
        one such line never costs the rest of the ledger. The next save
        rewrites them as UTF-8.
        """
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            pass

        lines = []
        legacy_lines = []
        for line_number, raw_line in enumerate(raw.split(b"\n"), start=1):
            try:
                lines.append(raw_line.decode("utf-8"))
            except UnicodeDecodeError:
                lines.append(raw_line.decode(LEGACY_ENCODING))
                legacy_lines.append(line_number)

        logger.warning(
            "ledger_legacy_encoding",
            path=self.location,
            encoding=LEGACY_ENCODING,
            lines=legacy_lines,
        )
        return "\n".join(lines)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write(self, text: str) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp, self._path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise
