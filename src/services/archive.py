"""
ZIP archive utilities.

This module opens the downloaded archive in memory and exposes its entries
in central-directory order.
"""

import io
import logging
import zipfile
import zlib
from dataclasses import dataclass
from typing import List

try:
    import lzma
except ImportError:  # pragma: no cover
    lzma = None

logger = logging.getLogger(__name__)

# Errors raised while decompressing a single entry
_ENTRY_READ_ERRORS = (
    zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError, EOFError
) + ((lzma.LZMAError,) if lzma is not None else ())


class InvalidArchiveError(Exception):
    """Raised when the payload is not a readable ZIP container."""
    pass


class EntryReadError(Exception):
    """Raised when a single archive entry cannot be opened or decompressed."""
    pass


@dataclass(frozen=True)
class ArchiveEntry:
    """
    One file inside the archive.

    Attributes:
        index: 0-based position in the archive
        info: Central-directory record for the entry
        archive: Open ZipFile the entry belongs to
    """
    index: int
    info: zipfile.ZipInfo
    archive: zipfile.ZipFile

    @property
    def name(self) -> str:
        return self.info.filename

    def read(self) -> bytes:
        """
        Decompress the entry into memory.

        Returns:
            bytes: Decompressed content

        Raises:
            EntryReadError: If the entry is corrupt or uses an unsupported compression
        """
        try:
            return self.archive.read(self.info)
        except _ENTRY_READ_ERRORS as e:
            raise EntryReadError(f"Problem with zip: {self.name}: {e}") from e


def open_archive(payload: bytes) -> zipfile.ZipFile:
    """
    Interpret the payload as a ZIP container.

    Args:
        payload: Raw archive bytes

    Returns:
        zipfile.ZipFile: Open archive (caller closes it)

    Raises:
        InvalidArchiveError: If the payload is not a valid ZIP file
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(payload))
    except (zipfile.BadZipFile, OSError, ValueError) as e:
        raise InvalidArchiveError(f"not a valid zip file: {e}") from e

    logger.info(f"Opened archive: {len(payload):,} bytes, {len(archive.infolist())} entries")
    return archive


def list_entries(archive: zipfile.ZipFile) -> List[ArchiveEntry]:
    """Return the archive's entries in enumeration order."""
    return [
        ArchiveEntry(index=index, info=info, archive=archive)
        for index, info in enumerate(archive.infolist())
    ]
