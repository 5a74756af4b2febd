from __future__ import annotations
import time
from typing import Callable, List, Optional, Sequence

import structlog

from .config import LayoutConfig, load_layout
from .exceptions import FileExtractionError
from .models import Employee, ExtractionResult, ProcessingStats
from .parsing import extract_employees
from .parsing_pdf import PdfSource, read_pdf_lines, source_name

logger = structlog.get_logger()

LineReader = Callable[[PdfSource], List[str]]
ProgressCallback = Callable[[float], None]


def extract_from_file(
    source: PdfSource,
    config: Optional[LayoutConfig] = None,
    reader: LineReader = read_pdf_lines,
) -> List[Employee]:
    """Employees of one PDF. Raises FileExtractionError if it cannot be read."""
    name = source_name(source)
    try:
        lines = reader(source)
    except FileExtractionError:
        raise
    except Exception as e:
        raise FileExtractionError(f"Erro ao processar arquivo {name}: {e}", source=name) from e
    employees = extract_employees(lines, config)
    logger.info("file_extracted", file=name, employees=len(employees))
    return employees


def extract_from_files(
    sources: Sequence[PdfSource],
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[LayoutConfig] = None,
    reader: LineReader = read_pdf_lines,
) -> ExtractionResult:
    """
    Process files one at a time. A file that fails is recorded in
    stats.errors and the remaining files are still processed.
    """
    start = time.perf_counter()
    config = config or load_layout()
    stats = ProcessingStats(total_files=len(sources))
    employees: List[Employee] = []

    for i, source in enumerate(sources):
        try:
            found = extract_from_file(source, config, reader)
        except FileExtractionError as e:
            stats.errors.append(e.message)
            logger.warning("file_failed", error=e.message, **e.details)
        else:
            employees.extend(found)
            stats.successful_extractions += 1
            stats.total_employees += len(found)
        if on_progress is not None:
            on_progress((i + 1) / len(sources) * 100)

    stats.processing_time = (time.perf_counter() - start) * 1000
    result = ExtractionResult(employees=employees, stats=stats)
    logger.info(
        "batch_finished",
        files=stats.total_files,
        employees=stats.total_employees,
        errors=len(stats.errors),
        ms=round(stats.processing_time, 1),
    )
    return result
