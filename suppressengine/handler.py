"""
Suppression handler - applies the rule tables to one visited class-like entity
"""

import logging
from typing import Iterable, Optional

from .exceptions import InvalidClassRecordError
from .models import ClassLikeRecord, SuppressibleRecord, SuppressionRuleSet
from .rule_loader import get_default_rule_set

logger = logging.getLogger(__name__)


class SuppressHandler:
    """
    Marks framework-convention issues as suppressed on a class and its members.

    The handler keeps nothing but its rule set between calls. Each call walks
    the seven tables in a fixed order and appends issue identifiers to the
    suppression lists of the record it is handed, never twice.
    """

    def __init__(self, rules: Optional[SuppressionRuleSet] = None):
        self.rules = rules if rules is not None else get_default_rule_set()

    def after_class_like_visit(self, event) -> None:
        """Hook entry point for AfterClassLikeVisitEvent"""
        self.apply(event.get_storage())

    def apply(self, storage: ClassLikeRecord) -> None:
        """Apply every rule table to a single class-like record"""
        if storage is None or not isinstance(storage, ClassLikeRecord):
            raise InvalidClassRecordError(
                f"expected a class-like record, got {type(storage).__name__}"
            )

        rules = self.rules
        name = storage.name
        separator = rules.namespace_separator

        for issue, class_names in rules.by_class.items():
            if name in class_names:
                self._suppress(issue, storage, name)

        for issue, methods_by_class in rules.by_class_method.items():
            for method_name in methods_by_class.get(name, ()):
                self._suppress(issue, storage.get_method(method_name), f"{name}::{method_name}")

        for issue, namespaces in rules.by_namespace.items():
            for namespace in namespaces:
                if not name.startswith(namespace + separator):
                    continue

                self._suppress(issue, storage, name)
                break

        for issue, methods_by_namespace in rules.by_namespace_method.items():
            for namespace, method_names in methods_by_namespace.items():
                if not name.startswith(namespace + separator):
                    continue

                for method_name in method_names:
                    self._suppress(issue, storage.get_method(method_name), f"{name}::{method_name}")

        for issue, parent_classes in rules.by_parent_class.items():
            if not _intersects(storage.parent_classes, parent_classes):
                continue

            self._suppress(issue, storage, name)

        for issue, properties_by_parent in rules.by_parent_class_property.items():
            for parent_class, property_names in properties_by_parent.items():
                if parent_class not in storage.parent_classes:
                    continue

                for property_name in property_names:
                    self._suppress(issue, storage.get_property(property_name), f"{name}::${property_name}")

        for issue, used_traits in rules.by_used_trait.items():
            if not _intersects(storage.used_traits, used_traits):
                continue

            self._suppress(issue, storage, name)

    @staticmethod
    def _suppress(issue: str, target: Optional[SuppressibleRecord], label: str) -> bool:
        """Append issue to target's suppression list unless absent or already there"""
        if target is None:
            return False
        if issue in target.suppressed_issues:
            return False

        target.suppressed_issues.append(issue)
        logger.debug(f"Suppressed {issue} on {label}")
        return True


def _intersects(values: Iterable[str], candidates: Iterable[str]) -> bool:
    return not set(values).isdisjoint(candidates)
