"""
Single pass over the text lines of one folha analítica.

Each line goes through ``step``, which takes the current ``ParseContext`` and
returns a new one, plus the employee finalized by that line when it opens
the next record. ``extract_employees`` threads ``step`` over a whole file.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence

import structlog

from .accumulator import Accumulator, finalize
from .boundary import Draft, is_boundary, open_draft
from .config import LayoutConfig, load_layout
from .events import RECOGNIZERS, ScanMode, is_event_row, is_single_line_header
from .fields import collect_totals, extract_fields
from .models import Employee

logger = structlog.get_logger()


@dataclass(frozen=True)
class ParseContext:
    draft: Optional[Draft] = None
    acc: Accumulator = field(default_factory=Accumulator)
    mode: ScanMode = ScanMode.SCANNING


@dataclass(frozen=True)
class StepResult:
    context: ParseContext
    employee: Optional[Employee]
    next_index: int


def _next_mode(mode: ScanMode, line: str, totals_line: bool, config: LayoutConfig) -> ScanMode:
    if totals_line:
        return ScanMode.AFTER_TOTALS_SCAN
    if is_single_line_header(line, config):
        return ScanMode.INSIDE_TABLE
    if mode is ScanMode.AFTER_TOTALS_SCAN and not is_event_row(line):
        return ScanMode.SCANNING
    return mode


def step(lines: Sequence[str], index: int, context: ParseContext,
         config: LayoutConfig) -> StepResult:
    line = lines[index].strip()
    if not line:
        return StepResult(context, None, index + 1)

    if is_boundary(line):
        employee = finalize(context.draft, context.acc)
        draft = open_draft(lines, index, config)
        return StepResult(replace(context, draft=draft, acc=Accumulator()), employee, index + 1)

    draft = context.draft
    if draft is not None:
        draft = draft.with_fields(**extract_fields(line, config))

    hit = collect_totals(lines, index, config)
    acc = context.acc.with_totals(hit.values)

    next_index = index + 1
    for recognizer in RECOGNIZERS:
        rec = recognizer.recognize(lines, index, context.mode, config)
        if rec is None:
            continue
        acc = acc.merge(rec, config.deduplicate_events)
        if rec.next_index is not None:
            next_index = max(rec.next_index, index + 1)
            break

    mode = _next_mode(context.mode, line, hit.matched, config)
    if mode is not context.mode:
        logger.debug("scan_mode", line=index, mode=mode.value)

    return StepResult(ParseContext(draft=draft, acc=acc, mode=mode), None, next_index)


def extract_employees(lines: Iterable[str], config: Optional[LayoutConfig] = None) -> List[Employee]:
    """
    Employees found in the ordered lines of one file (all pages, in page
    order). Malformed content never raises; unmatched lines are skipped.
    """
    config = config or load_layout()
    lines = list(lines)
    employees: List[Employee] = []
    context = ParseContext()
    i = 0
    while i < len(lines):
        result = step(lines, i, context, config)
        if result.employee is not None:
            employees.append(result.employee)
        context = result.context
        i = result.next_index

    last = finalize(context.draft, context.acc)
    if last is not None:
        employees.append(last)
    logger.info("lines_scanned", lines=len(lines), employees=len(employees))
    return employees
