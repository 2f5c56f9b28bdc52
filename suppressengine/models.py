"""
Data models for the suppression engine.

This module defines the structures the engine reads and mutates:

- SuppressibleRecord/ClassLikeRecord: the narrow interface the handler needs
  from a host analyzer's class, method and property storage
- ClassLikeStorage/MethodStorage/PropertyStorage: in-memory records that
  satisfy that interface (host adapters, offline evaluation, tests)
- SuppressionRuleSet/RuleEntry: the immutable rule tables

The rule set is frozen on construction. Host records are never created,
cached or destroyed by the handler, only appended to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any, Collection, Dict, Iterator, List, Mapping, Optional, Protocol,
    Sequence, Tuple, runtime_checkable,
)

from .exceptions import ClassDescriptionError


DEFAULT_NAMESPACE_SEPARATOR = '\\'

# Tables in the order the handler evaluates them
FLAT_TABLES = ('by_class', 'by_namespace', 'by_parent_class', 'by_used_trait')
NESTED_TABLES = ('by_class_method', 'by_namespace_method', 'by_parent_class_property')
RULE_TABLES = (
    'by_class',
    'by_class_method',
    'by_namespace',
    'by_namespace_method',
    'by_parent_class',
    'by_parent_class_property',
    'by_used_trait',
)


@runtime_checkable
class SuppressibleRecord(Protocol):
    """Anything carrying a mutable list of suppressed issue identifiers"""
    suppressed_issues: List[str]


@runtime_checkable
class ClassLikeRecord(Protocol):
    """What the handler reads from a visited class, interface or trait"""
    name: str
    parent_classes: Sequence[str]
    used_traits: Collection[str]
    suppressed_issues: List[str]

    def get_method(self, name: str) -> Optional[SuppressibleRecord]:
        ...

    def get_property(self, name: str) -> Optional[SuppressibleRecord]:
        ...


@dataclass
class MethodStorage:
    """A method declared directly on a class"""
    name: str
    suppressed_issues: List[str] = field(default_factory=list)


@dataclass
class PropertyStorage:
    """A property declared directly on a class"""
    name: str
    suppressed_issues: List[str] = field(default_factory=list)


@dataclass
class ClassLikeStorage:
    """
    In-memory description of one class-like entity.

    Methods are keyed by lower-cased name, properties by exact name, the same
    way the host analyzer keys its own storage.
    """
    name: str
    parent_classes: List[str] = field(default_factory=list)
    used_traits: List[str] = field(default_factory=list)
    methods: Dict[str, MethodStorage] = field(default_factory=dict)
    properties: Dict[str, PropertyStorage] = field(default_factory=dict)
    suppressed_issues: List[str] = field(default_factory=list)

    def add_method(self, name: str,
                   suppressed_issues: Optional[List[str]] = None) -> MethodStorage:
        method = MethodStorage(name=name, suppressed_issues=list(suppressed_issues or []))
        self.methods[name.lower()] = method
        return method

    def add_property(self, name: str,
                     suppressed_issues: Optional[List[str]] = None) -> PropertyStorage:
        prop = PropertyStorage(name=name, suppressed_issues=list(suppressed_issues or []))
        self.properties[name] = prop
        return prop

    def get_method(self, name: str) -> Optional[MethodStorage]:
        return self.methods.get(name.lower())

    def get_property(self, name: str) -> Optional[PropertyStorage]:
        return self.properties.get(name)

    def suppression_state(self) -> Dict[str, List[str]]:
        """Current suppression lists keyed by 'class', 'method:<name>', 'property:<name>'"""
        state = {'class': list(self.suppressed_issues)}
        for method in self.methods.values():
            state[f"method:{method.name}"] = list(method.suppressed_issues)
        for prop in self.properties.values():
            state[f"property:{prop.name}"] = list(prop.suppressed_issues)
        return state

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ClassLikeStorage':
        """Build a record from a parsed class description entry"""
        if not isinstance(data, Mapping):
            raise ClassDescriptionError(f"expected a mapping, got {type(data).__name__}")

        name = data.get('name')
        if not isinstance(name, str):
            raise ClassDescriptionError("class description needs a string 'name'")

        storage = cls(
            name=name,
            parent_classes=_string_list(data.get('parent_classes'), 'parent_classes', name),
            used_traits=_string_list(data.get('used_traits'), 'used_traits', name),
            suppressed_issues=_string_list(data.get('suppressed_issues'), 'suppressed_issues', name),
        )

        for member_name, issues in _members(data.get('methods'), 'methods', name):
            storage.add_method(member_name, issues)
        for member_name, issues in _members(data.get('properties'), 'properties', name):
            storage.add_property(member_name, issues)

        return storage


def _string_list(value: Any, field_name: str, owner: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ClassDescriptionError(f"'{field_name}' must be a list of strings", owner)
    return list(value)


def _members(value: Any, field_name: str, owner: str) -> List[Tuple[str, List[str]]]:
    """Accept either a list of member names or a mapping of name -> suppressed issues"""
    if value is None:
        return []
    if isinstance(value, list):
        return [(n, []) for n in _string_list(value, field_name, owner)]
    if isinstance(value, Mapping):
        if not all(isinstance(n, str) for n in value):
            raise ClassDescriptionError(f"'{field_name}' member names must be strings", owner)
        return [
            (n, _string_list(issues, f"{field_name}.{n}", owner))
            for n, issues in value.items()
        ]
    raise ClassDescriptionError(f"'{field_name}' must be a list or a mapping", owner)


@dataclass(frozen=True)
class RuleEntry:
    """One flattened rule, used for listing and reporting"""
    table: str
    issue: str
    target: str
    members: Tuple[str, ...] = ()

    def __str__(self) -> str:
        if self.members:
            return f"{self.issue}: {self.target} -> {', '.join(self.members)}"
        return f"{self.issue}: {self.target}"


@dataclass(frozen=True)
class SuppressionRuleSet:
    """
    The seven read-only rule tables.

    Flat tables map an issue to a tuple of names or namespaces. Nested tables
    map an issue to {class, namespace or parent -> tuple of member names}.
    Inputs are copied into tuples and mapping proxies on construction.
    """
    by_class: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    by_class_method: Mapping[str, Mapping[str, Tuple[str, ...]]] = field(default_factory=dict)
    by_namespace: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    by_namespace_method: Mapping[str, Mapping[str, Tuple[str, ...]]] = field(default_factory=dict)
    by_parent_class: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    by_parent_class_property: Mapping[str, Mapping[str, Tuple[str, ...]]] = field(default_factory=dict)
    by_used_trait: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    namespace_separator: str = DEFAULT_NAMESPACE_SEPARATOR
    root_namespace: Optional[str] = None
    source: Optional[str] = None

    def __post_init__(self) -> None:
        for table in FLAT_TABLES:
            object.__setattr__(self, table, _freeze_flat(getattr(self, table)))
        for table in NESTED_TABLES:
            object.__setattr__(self, table, _freeze_nested(getattr(self, table)))

    def table(self, name: str) -> Mapping[str, Any]:
        if name not in RULE_TABLES:
            raise KeyError(name)
        return getattr(self, name)

    def iter_rules(self) -> Iterator[RuleEntry]:
        """Yield every rule, table by table in evaluation order"""
        for name in RULE_TABLES:
            for issue, keys in self.table(name).items():
                if name in NESTED_TABLES:
                    for target, members in keys.items():
                        yield RuleEntry(table=name, issue=issue, target=target, members=members)
                else:
                    for target in keys:
                        yield RuleEntry(table=name, issue=issue, target=target)

    @property
    def rule_count(self) -> int:
        return sum(1 for _ in self.iter_rules())

    @property
    def is_empty(self) -> bool:
        return self.rule_count == 0


def _freeze_flat(table: Mapping[str, Sequence[str]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({issue: tuple(keys) for issue, keys in table.items()})


def _freeze_nested(
    table: Mapping[str, Mapping[str, Sequence[str]]],
) -> Mapping[str, Mapping[str, Tuple[str, ...]]]:
    return MappingProxyType({
        issue: MappingProxyType({key: tuple(members) for key, members in by_key.items()})
        for issue, by_key in table.items()
    })


@dataclass
class ClassReport:
    """Suppressions newly added to one class by a handler run"""
    name: str
    added: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(len(issues) for issues in self.added.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'added': {target: list(issues) for target, issues in self.added.items()},
            'total': self.total,
        }


@dataclass
class EvaluationResult:
    """Result of running the handler over a file of class descriptions"""
    source: str
    rules_file: Optional[str] = None
    rule_count: int = 0
    reports: List[ClassReport] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def total_suppressions(self) -> int:
        return sum(r.total for r in self.reports)

    def get_affected_classes(self) -> List[ClassReport]:
        """Reports for classes that received at least one suppression"""
        return [r for r in self.reports if r.total]

    def summary(self) -> Dict[str, int]:
        """Count of added suppressions per issue type"""
        counts: Dict[str, int] = {}
        for report in self.reports:
            for issues in report.added.values():
                for issue in issues:
                    counts[issue] = counts.get(issue, 0) + 1
        return counts

    def __iter__(self) -> Iterator[ClassReport]:
        return iter(self.reports)

    def __len__(self) -> int:
        return len(self.reports)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'rules_file': self.rules_file,
            'rule_count': self.rule_count,
            'classes': [r.to_dict() for r in self.reports],
            'summary': self.summary(),
            'total_suppressions': self.total_suppressions,
            'errors': self.errors,
        }
