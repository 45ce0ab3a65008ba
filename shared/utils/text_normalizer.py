import re
import unicodedata
from typing import Optional

SIZE_SEPARATORS = re.compile(r"[-_ ]")
COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
NON_ALNUM = re.compile(r"[^A-Za-z0-9]")

CATEGORY_CODE_MAP = {
    "Áo Dài": "AD",
    "Áo": "AO",
    "Quần": "QU",
    "Văn Nghệ": "VN",
    "Đồ Tây": "DT",
    "Giầy": "GI",
    "Dụng Cụ": "DC",
    "Đầm Dạ Hội": "DH",
}


def normalize_size(value: Optional[str]) -> str:
    """``"Size S"``, ``"size-s"`` and ``"SIZE_S"`` all become ``"sizes"``."""
    return SIZE_SEPARATORS.sub("", value or "").lower()


def sizes_match(a: Optional[str], b: Optional[str]) -> bool:
    return normalize_size(a) == normalize_size(b)


def normalize_vietnamese(value: Optional[str]) -> str:
    value = (value or "").lower().replace("đ", "d").replace("Đ", "d")
    return COMBINING_MARKS.sub("", unicodedata.normalize("NFD", value))


def query_words(query: Optional[str]) -> list[str]:
    return [w for w in normalize_vietnamese(query).split() if w]


def contains_all_words(text: Optional[str], words: list[str]) -> bool:
    normalized = normalize_vietnamese(text)
    return all(word in normalized for word in words)


def format_item_code(category: Optional[str], counter: Optional[int]) -> str:
    """Display id such as ``AD-000001`` built from category and running number."""
    category = (category or "").strip()
    code = CATEGORY_CODE_MAP.get(category)
    if not code:
        initials = "".join(w[0] for w in category.split())
        code = normalize_vietnamese(initials).upper()[:2] or "XX"
    return f"{code}-{int(counter or 0):06d}"


def compact_code(value: Optional[str]) -> str:
    return NON_ALNUM.sub("", value or "").upper()
