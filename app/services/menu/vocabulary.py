"""Menu item vocabulary used to canonicalize free-text item names."""
import logging
import yaml
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class VocabularyVariant(BaseModel):
    """Alternate canonical name selected by extra keywords."""

    keywords: List[str]
    name: str

    def matches(self, text_lower: str) -> bool:
        """Check if any keyword is contained in the lowercased text."""
        return any(keyword.lower() in text_lower for keyword in self.keywords)


class VocabularyRule(VocabularyVariant):
    """Canonicalization rule for one menu item."""

    variants: List[VocabularyVariant] = []

    def resolve(self, text_lower: str) -> str:
        """Get the canonical name for text already known to match this rule."""
        for variant in self.variants:
            if variant.matches(text_lower):
                return variant.name
        return self.name


DEFAULT_RULES = [
    VocabularyRule(keywords=["bruschetta"], name="Bruschetta"),
    VocabularyRule(
        keywords=["wing"],
        name="2lb Wings",
        variants=[VocabularyVariant(keywords=["1lb", "one lb"], name="1lb Wings")],
    ),
    VocabularyRule(keywords=["quesadilla"], name="Quesadilla"),
    VocabularyRule(keywords=["burger"], name="Angus Burger"),
    VocabularyRule(keywords=["caesar"], name="Caesar Salad"),
    VocabularyRule(keywords=["garlic bread"], name="Garlic Bread W/cheese"),
]


class MenuVocabulary:
    """Ordered vocabulary of canonical item names backed by a YAML file."""

    def __init__(self, vocabulary_file: Optional[str] = None):
        """Initialize with optional vocabulary file path."""
        if vocabulary_file is None:
            vocabulary_file = Path(__file__).parent / "data" / "vocabulary.yaml"
        self.vocabulary_file = Path(vocabulary_file)
        self._rules: Optional[List[VocabularyRule]] = None

    def _load_rules(self) -> List[VocabularyRule]:
        """Load rules from the YAML file, falling back to the built-in rules."""
        if self._rules is None:
            if not self.vocabulary_file.exists():
                logger.warning(
                    f"[VOCABULARY] {self.vocabulary_file} not found, using built-in rules"
                )
                self._rules = list(DEFAULT_RULES)
            else:
                try:
                    with open(self.vocabulary_file, "r") as f:
                        data = yaml.safe_load(f) or {}
                    self._rules = [
                        VocabularyRule(**item) for item in data.get("items", [])
                    ]
                except (yaml.YAMLError, ValidationError, TypeError, AttributeError) as e:
                    logger.error(
                        f"[VOCABULARY] Could not load {self.vocabulary_file}: {e}, "
                        "using built-in rules"
                    )
                    self._rules = list(DEFAULT_RULES)
        return self._rules

    @property
    def rules(self) -> List[VocabularyRule]:
        """Get the ordered canonicalization rules."""
        return self._load_rules()

    def canonicalize(self, name: str) -> str:
        """
        Map a free-text item name onto its canonical menu name.

        The first rule whose keyword is contained in the name wins (case-insensitive).
        Names that match no rule are returned unchanged apart from trimming.
        """
        name = name.strip()
        name_lower = name.lower()
        for rule in self._load_rules():
            if rule.matches(name_lower):
                return rule.resolve(name_lower)
        return name


_default_vocabulary: Optional[MenuVocabulary] = None


def get_default_vocabulary() -> MenuVocabulary:
    """Get the process-wide vocabulary loaded from the packaged YAML file."""
    global _default_vocabulary
    if _default_vocabulary is None:
        _default_vocabulary = MenuVocabulary()
    return _default_vocabulary
