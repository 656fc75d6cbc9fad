
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .entities import CatalogEntity, EntityT

"""
Catalog search contract: filter helpers used by store and dashboard listings.
"""


# ---------------------------------------------------------------------------
# Filter model
# ---------------------------------------------------------------------------

@dataclass
class CatalogFilter:
    """Optional structured filters applied after the free-text search."""
    category: Optional[str] = None
    max_price: Optional[float] = None
    in_stock_only: bool = False                  # drops entities whose cart cap is 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def matches_term(entity: CatalogEntity, term: str) -> bool:
    """Case-insensitive substring match on name, description or category."""
    needle = term.strip().lower()
    if not needle:
        return True
    haystacks = [entity.name, entity.description, getattr(entity, "category", None)]
    return any(h and needle in str(h).lower() for h in haystacks)


def filter_entities(entities: Sequence[EntityT], term: str = "", f: Optional[CatalogFilter] = None) -> List[EntityT]:
    """Apply a search term and an optional CatalogFilter, keeping input order."""
    result = [e for e in entities if matches_term(e, term or "")]

    if f is None:
        return result
    if f.category is not None:
        wanted = f.category.lower()
        result = [e for e in result if str(getattr(e, "category", "") or "").lower() == wanted]
    if f.max_price is not None:
        result = [e for e in result if e.price <= f.max_price]
    if f.in_stock_only:
        result = [e for e in result if e.max_available() > 0]

    return result
