"""File acquisition boundary.

Turns a document source (a filesystem path or raw uploaded bytes) into
decoded text. Undecodable bytes are replaced instead of failing, the same way
a browser FileReader behaves; only I/O failures are reported.
"""

import asyncio
import logging
from pathlib import Path

from services.shared.config import Settings

logger = logging.getLogger(__name__)

DocumentSource = str | Path | bytes


class DocumentReadError(Exception):
    """Raised when a document source cannot be read."""


class DocumentReader:
    """Reads document sources as text.

    File reads run in a worker thread so several documents can be read
    concurrently from the event loop.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize reader.

        Args:
            settings: Application settings (default encodings)
        """
        self.settings = settings

    def decode(self, data: bytes, encoding: str | None = None) -> str:
        return data.decode(encoding or self.settings.invoice_encoding, errors="replace")

    def read_bytes(self, source: DocumentSource) -> bytes:
        """Read raw bytes from a source.

        Raises:
            DocumentReadError: If the source is missing or unreadable
        """
        if isinstance(source, bytes):
            return source
        path = Path(source)
        try:
            return path.read_bytes()
        except OSError as e:
            raise DocumentReadError(f"Cannot read document {path}: {e}") from e

    async def read_as_text(self, source: DocumentSource, encoding: str | None = None) -> str:
        """Read a source and decode it.

        Args:
            source: Path to a file or raw bytes
            encoding: Explicit encoding; defaults to the invoice encoding

        Returns:
            Decoded document text

        Raises:
            DocumentReadError: If the source cannot be read
        """
        data = await asyncio.to_thread(self.read_bytes, source)
        logger.debug(f"Read {len(data)} bytes")
        return self.decode(data, encoding)

