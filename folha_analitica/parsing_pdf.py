from __future__ import annotations
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import pdfplumber
import structlog

from .exceptions import FileExtractionError, PageExtractionError

logger = structlog.get_logger()

PdfSource = Union[str, Path, BinaryIO]

def source_name(source: PdfSource) -> str:
    if isinstance(source, (str, Path)):
        return Path(source).name
    return Path(getattr(source, "name", "") or "<stream>").name

def page_lines(page, num: int = 0, source: Optional[str] = None) -> List[str]:
    try:
        text = page.extract_text() or ""
    except Exception as e:
        raise PageExtractionError(f"falha ao ler página {num}: {e}", source=source, page=num) from e
    return [l.strip() for l in text.splitlines() if l.strip()]

def read_pdf_lines(source: PdfSource) -> List[str]:
    """
    Text lines of every page, in page order. A page that fails to extract is
    dropped; a file that cannot be opened raises FileExtractionError.
    """
    name = source_name(source)
    lines: List[str] = []
    try:
        with pdfplumber.open(source) as pdf:
            for num, page in enumerate(pdf.pages, start=1):
                try:
                    lines.extend(page_lines(page, num, name))
                except PageExtractionError as e:
                    logger.warning("page_extraction_failed", error=e.message, **e.details)
    except Exception as e:
        raise FileExtractionError(f"Erro ao processar arquivo {name}: {e}", source=name) from e
    logger.debug("pdf_read", file=name, lines=len(lines))
    return lines
