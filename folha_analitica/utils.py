from __future__ import annotations
import re
from unidecode import unidecode

RE_NUMERIC_LIKE = re.compile(r"[0-9.,-]+")
RE_DASHES = re.compile(r"[-‐‑‒–—―−]+")

def normalize_name(name: str) -> str:
    name = unidecode(name or "").upper()
    name = re.sub(r"\s+", " ", name).strip()
    return name

def normalize_branch(text: str) -> str:
    """
    "Uniceuma - Anil" -> "UNICEUMA ANIL"
    Diacritics stripped, dashes/hyphens become spaces, whitespace collapsed.
    """
    s = RE_DASHES.sub(" ", text or "")
    return normalize_name(s)

def normalize_header(text: str) -> str:
    s = unidecode(text or "").casefold()
    return re.sub(r"\s+", " ", s).strip()

def parse_value(value: str) -> float:
    """
    Convert "1.234,56" to 1234.56 and "-150,00" to -150.0.
    Anything unparseable becomes 0.0.
    """
    if value is None:
        return 0.0
    s = str(value).strip()
    s = s.replace(".", "").replace(",", ".")
    s = re.sub(r"[^0-9\.\-]", "", s)
    try:
        return float(s)
    except ValueError:
        return 0.0

def is_numeric_like(value: str) -> bool:
    return bool(RE_NUMERIC_LIKE.fullmatch((value or "").strip()))
