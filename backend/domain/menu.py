"""Menu catalog entries that order lines are copied from."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LocalizedText:
    """Display text in the venue's two locales."""

    en: str
    mm: str = ""

    def get(self, lang: str) -> str:
        if lang == "mm" and self.mm:
            return self.mm
        return self.en


@dataclass(frozen=True)
class MenuItem:
    item_id: str
    name: LocalizedText
    category: str
    price: float
    image: str = ""
    available: bool = True
    is_popular: bool = False
    stock: Optional[int] = None
    description: Optional[LocalizedText] = None
    preparation_time: Optional[int] = None  # minutes
