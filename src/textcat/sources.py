"""Readers that turn training corpora and documents into raw text.

Plain text and HTML need nothing beyond the standard library. PDF and DOCX
support rely on the optional ``pdfplumber`` and ``python-docx`` packages
(``pip install textcat[pdf,docx]``).
"""

from __future__ import annotations

import html as html_module
import logging
import re
from abc import ABC, abstractmethod
from html.parser import HTMLParser
from pathlib import Path

logger = logging.getLogger(__name__)


class SourceReader(ABC):
    """Base class for file readers.

    Subclasses list the extensions they accept and implement ``read``.
    """

    supported_extensions: tuple[str, ...] = ()

    def can_handle(self, path: Path) -> bool:
        return path.suffix.lower() in self.supported_extensions

    @abstractmethod
    def read(self, path: Path) -> str:
        """Return the text content of a file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the extension is not supported by this reader.
        """
        ...

    def _validate_path(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not self.can_handle(path):
            raise ValueError(
                f"Unsupported file extension '{path.suffix}' for {self.__class__.__name__}. "
                f"Supported: {self.supported_extensions}"
            )


class TextReader(SourceReader):
    """Plain UTF-8 text. Undecodable bytes are replaced, not fatal."""

    supported_extensions = (".txt", ".text", ".md")

    def read(self, path: Path) -> str:
        self._validate_path(path)
        return path.read_text(encoding="utf-8", errors="replace")


class _TextExtractor(HTMLParser):
    _SKIPPED = ("script", "style", "head")
    _BLOCKS = ("p", "div", "br", "h1", "h2", "h3", "h4", "h5", "h6", "li", "tr")

    def __init__(self) -> None:
        super().__init__()
        self.parts: list[str] = []
        self._skip = 0

    def handle_starttag(self, tag: str, attrs: list) -> None:
        if tag in self._SKIPPED:
            self._skip += 1

    def handle_endtag(self, tag: str) -> None:
        if tag in self._SKIPPED and self._skip:
            self._skip -= 1
        if tag in self._BLOCKS:
            self.parts.append("\n")

    def handle_data(self, data: str) -> None:
        if not self._skip:
            self.parts.append(data)


class HTMLReader(SourceReader):
    """HTML pages, with scripts, styles and the head removed."""

    supported_extensions = (".html", ".htm")

    def read(self, path: Path) -> str:
        self._validate_path(path)
        return self.strip_html(path.read_text(encoding="utf-8", errors="replace"))

    @staticmethod
    def strip_html(markup: str) -> str:
        extractor = _TextExtractor()
        extractor.feed(markup)
        extractor.close()
        text = html_module.unescape("".join(extractor.parts))
        return re.sub(r"\n{3,}", "\n\n", text).strip()


class PDFReader(SourceReader):
    """PDF documents, read page by page with pdfplumber."""

    supported_extensions = (".pdf",)

    def read(self, path: Path) -> str:
        self._validate_path(path)

        try:
            import pdfplumber
        except ImportError as exc:
            raise ImportError(
                "pdfplumber is required for PDF input. Install it with: pip install pdfplumber"
            ) from exc

        with pdfplumber.open(str(path)) as pdf:
            pages = [(page.extract_text() or "").strip() for page in pdf.pages]
        logger.debug("Read %d PDF pages from %s", len(pages), path)
        return "\n\n".join(p for p in pages if p)


class DOCXReader(SourceReader):
    """Word documents, read paragraph by paragraph with python-docx."""

    supported_extensions = (".docx",)

    def read(self, path: Path) -> str:
        self._validate_path(path)

        try:
            from docx import Document
        except ImportError as exc:
            raise ImportError(
                "python-docx is required for DOCX input. Install it with: pip install python-docx"
            ) from exc

        doc = Document(str(path))
        return "\n\n".join(p.text for p in doc.paragraphs if p.text.strip())


def get_reader(path: Path) -> SourceReader:
    """Pick the reader for a file from its extension.

    Raises:
        ValueError: If no reader supports the extension.
    """
    readers: list[SourceReader] = [TextReader(), HTMLReader(), PDFReader(), DOCXReader()]
    for reader in readers:
        if reader.can_handle(path):
            return reader

    supported = sorted({ext for r in readers for ext in r.supported_extensions})
    raise ValueError(
        f"No reader available for '{path.suffix}'. "
        f"Supported formats: {', '.join(supported)}"
    )


def read_source(path: str | Path) -> str:
    """Read the text content of a supported file."""
    path = Path(path)
    return get_reader(path).read(path)
