"""
Hook registry for the "class-like entity visited" event.

A host analyzer owns the traversal. After it has populated the storage for a
class, interface or trait it dispatches one AfterClassLikeVisitEvent, and
every registered handler sees that storage in registration order:

    registry = HookRegistry()
    Plugin({'root_namespace': 'Acme'})(registry)
    registry.dispatch_after_class_like_visit(storage)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Union

from .handler import SuppressHandler
from .models import ClassLikeRecord
from .rule_loader import load_rule_set

logger = logging.getLogger(__name__)


@dataclass
class AfterClassLikeVisitEvent:
    """Raised once per visited class-like entity"""
    storage: ClassLikeRecord

    def get_storage(self) -> ClassLikeRecord:
        return self.storage


AfterClassLikeVisitCallback = Callable[[AfterClassLikeVisitEvent], None]


class HookRegistry:
    """Holds the handlers a host dispatches visit events to"""

    def __init__(self) -> None:
        self._after_class_like_visit: List[AfterClassLikeVisitCallback] = []

    def register_after_class_like_visit(
        self, handler: Union[AfterClassLikeVisitCallback, Any],
    ) -> Union[AfterClassLikeVisitCallback, Any]:
        """
        Register a handler object or a plain callable.

        Objects exposing after_class_like_visit() are registered through that
        method. Returns the handler so this also works as a decorator.
        """
        callback = getattr(handler, 'after_class_like_visit', handler)
        if not callable(callback):
            raise TypeError(f"{handler!r} cannot handle class-like visit events")

        self._after_class_like_visit.append(callback)
        logger.debug(f"Registered after-class-like-visit handler: {handler!r}")
        return handler

    @property
    def after_class_like_visit_handlers(self) -> List[AfterClassLikeVisitCallback]:
        return list(self._after_class_like_visit)

    def dispatch_after_class_like_visit(self, storage: ClassLikeRecord) -> AfterClassLikeVisitEvent:
        event = AfterClassLikeVisitEvent(storage=storage)
        for callback in self._after_class_like_visit:
            callback(event)
        return event


class Plugin:
    """
    Plugin entry object.

    Config keys (all optional):
        rules_file: path to a YAML rule file replacing the bundled one
        root_namespace: application root namespace, when it is not 'App'
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.config = dict(config or {})
        self.handler: Optional[SuppressHandler] = None

    def __call__(self, registry: HookRegistry) -> SuppressHandler:
        rules_file = self.config.get('rules_file')
        rules = load_rule_set(
            rules_file=Path(rules_file) if rules_file else None,
            root_namespace=self.config.get('root_namespace'),
        )
        self.handler = SuppressHandler(rules)
        registry.register_after_class_like_visit(self.handler)
        return self.handler
