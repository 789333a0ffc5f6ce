"""
Rule categories and the per-run registry of enabled checks.

The registry is built once before any worker starts and never changes
afterwards, so workers read it without locking.
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)


class Category(Enum):
    SCHEMA_VALIDATION_FAILED = "SchemaValidationFailed"
    INCORRECT_SCHEMA_VERSION = "IncorrectSchemaVersion"
    PREVIEW_SCHEMA_WITHOUT_PREVIEW_VERSION = "PreviewSchemaWithoutPreviewVersion"
    STABLE_SCHEMA_WITH_PREVIEW_VERSION = "StableSchemaWithPreviewVersion"
    LIST_OPERATION_USING_POST = "ListOperationUsingPost"


# Reported regardless of the enabled set; not selectable from the command line
LOAD_ERROR = "LoadError"
RULE_EVALUATION_FAILED = "RuleEvaluationFailed"


class CategoryDefault(Enum):
    FORCED_ON = "forced-on"
    FORCED_OFF = "forced-off"
    DEFAULT_ON = "default-on"
    DEFAULT_OFF = "default-off"


BUILTIN_DEFAULTS: Dict[Category, CategoryDefault] = {
    Category.SCHEMA_VALIDATION_FAILED: CategoryDefault.DEFAULT_OFF,
    Category.INCORRECT_SCHEMA_VERSION: CategoryDefault.DEFAULT_ON,
    Category.PREVIEW_SCHEMA_WITHOUT_PREVIEW_VERSION: CategoryDefault.DEFAULT_ON,
    Category.STABLE_SCHEMA_WITH_PREVIEW_VERSION: CategoryDefault.DEFAULT_ON,
    Category.LIST_OPERATION_USING_POST: CategoryDefault.DEFAULT_ON,
}

ALL_CATEGORY_NAMES = [category.value for category in Category]


class EnabledCategories:
    """Immutable set of categories enabled for one run"""

    def __init__(self, enabled: Iterable[Category]):
        self._enabled: FrozenSet[Category] = frozenset(enabled)

    def __contains__(self, category: object) -> bool:
        return category in self._enabled

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnabledCategories):
            return NotImplemented
        return self._enabled == other._enabled

    def __hash__(self) -> int:
        return hash(self._enabled)

    def __repr__(self) -> str:
        names = sorted(category.value for category in self._enabled)
        return f"EnabledCategories({names})"

    def as_dict(self) -> Dict[str, bool]:
        """Map every known category name to its enabled flag"""
        return {category.value: category in self._enabled for category in Category}


def build_enabled_categories(
    requested: Optional[Iterable[str]] = None,
    defaults: Mapping[Category, CategoryDefault] = BUILTIN_DEFAULTS,
) -> EnabledCategories:
    """Resolve the enabled categories from the defaults and a caller-supplied list.

    Args:
        requested: Category names the caller asked for, or None when no list
            was supplied at all (built-in defaults apply).
        defaults: Policy per category. Categories missing from the mapping
            are treated as DEFAULT_OFF.

    Returns:
        EnabledCategories for the run
    """
    listed = None
    if requested is not None:
        listed = set()
        for name in requested:
            name = name.strip()
            if not name:
                continue
            try:
                listed.add(Category(name))
            except ValueError:
                logger.debug("Ignoring unknown category %r", name)

    enabled = []
    for category in Category:
        policy = defaults.get(category, CategoryDefault.DEFAULT_OFF)
        if policy == CategoryDefault.FORCED_ON:
            enabled.append(category)
        elif policy == CategoryDefault.FORCED_OFF:
            continue
        elif listed is None:
            if policy == CategoryDefault.DEFAULT_ON:
                enabled.append(category)
        elif category in listed:
            enabled.append(category)

    return EnabledCategories(enabled)
