"""Order parsing service."""
import re
from typing import List, Optional
from app.services.ordering.models import ParsedLineItem
from app.services.menu.vocabulary import MenuVocabulary, get_default_vocabulary

QUANTITY_PATTERN = re.compile(r"^(\d+)\s+(.+)$", re.DOTALL)
MODIFICATION_DELIMITER = " with "
MODIFICATION_SPLIT_PATTERN = re.compile(r"\s+and\s+|\s*,\s*", re.IGNORECASE)


class OrderParser:
    """Service for turning a free-text order into structured line items."""

    def __init__(self, vocabulary: Optional[MenuVocabulary] = None):
        self.vocabulary = vocabulary or get_default_vocabulary()

    def parse(self, order_items: Optional[str]) -> List[ParsedLineItem]:
        """
        Parse a comma-separated order string into line items.

        Never raises: blank input yields an empty list and empty segments
        (e.g. from "a,,b" or a trailing comma) are skipped, so "a,,b" gives two
        items, not three. A blank item name would match any element on the
        menu page, so it is never passed on to the cart.

        Args:
            order_items: Free text such as "2 burgers with no onion, bruschetta"

        Returns:
            One ParsedLineItem per non-empty segment, in input order
        """
        if not order_items or not isinstance(order_items, str):
            return []

        segments = [segment.strip() for segment in order_items.split(",")]
        # Blank segments are dropped, not kept as nameless items
        return [self.parse_segment(segment) for segment in segments if segment]

    def parse_segment(self, segment: str) -> ParsedLineItem:
        """Parse a single order segment into a line item."""
        raw_text = segment.strip()
        text = raw_text
        quantity = 1

        # Leading "<n> " is the quantity
        quantity_match = QUANTITY_PATTERN.match(text)
        if quantity_match:
            quantity = max(1, int(quantity_match.group(1)))
            text = quantity_match.group(2)

        modifications: List[str] = []
        with_index = text.lower().find(MODIFICATION_DELIMITER)
        if with_index > -1:
            name = text[:with_index].strip()
            modifications_text = text[with_index + len(MODIFICATION_DELIMITER):].strip()
            modifications = [
                m.strip()
                for m in MODIFICATION_SPLIT_PATTERN.split(modifications_text)
                if m and m.strip()
            ]
        else:
            name = text.strip()

        return ParsedLineItem(
            raw_text=raw_text,
            canonical_name=self.vocabulary.canonicalize(name),
            quantity=quantity,
            modifications=modifications,
        )

    def canonicalize(self, name: str) -> str:
        """Canonicalize an item name against the vocabulary."""
        return self.vocabulary.canonicalize(name)


def parse_order_items(
    order_items: Optional[str], vocabulary: Optional[MenuVocabulary] = None
) -> List[ParsedLineItem]:
    """Parse a free-text order using the default vocabulary."""
    return OrderParser(vocabulary).parse(order_items)
