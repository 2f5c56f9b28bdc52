"""
Rule loader - parses YAML suppression rule files into a SuppressionRuleSet
"""

import functools
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .exceptions import RuleConfigurationError
from .models import (
    DEFAULT_NAMESPACE_SEPARATOR, FLAT_TABLES, RULE_TABLES, SuppressionRuleSet,
)

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE = Path(__file__).parent / "rules" / "laravel.yaml"


class RuleLoader:
    """Loads suppression rule tables from a YAML file"""

    def __init__(self, rules_file: Optional[Union[str, Path]] = None,
                 root_namespace: Optional[str] = None):
        self.rules_file = Path(rules_file) if rules_file else DEFAULT_RULES_FILE
        self.root_namespace = root_namespace
        self.rule_set: Optional[SuppressionRuleSet] = None

    def load(self) -> SuppressionRuleSet:
        """Read and parse the configured rules file"""
        source = str(self.rules_file)

        if not self.rules_file.is_file():
            raise RuleConfigurationError("rules file not found", source)

        try:
            with open(self.rules_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RuleConfigurationError(f"invalid YAML: {e}", source) from e
        except OSError as e:
            raise RuleConfigurationError(f"cannot read rules file: {e}", source) from e

        self.rule_set = self.parse(data, source=source)
        logger.info(f"Loaded {self.rule_set.rule_count} suppression rules from {self.rules_file.name}")
        return self.rule_set

    def parse(self, data: Any, source: Optional[str] = None) -> SuppressionRuleSet:
        """Build a rule set from already-parsed YAML data"""
        if not data:
            logger.warning(f"No suppression rules in {source or 'rule data'}")
            return SuppressionRuleSet(root_namespace=self.root_namespace, source=source)

        if not isinstance(data, Mapping):
            raise RuleConfigurationError("top level must be a mapping", source)

        metadata = data.get('metadata') or {}
        if not isinstance(metadata, Mapping):
            raise RuleConfigurationError("'metadata' must be a mapping", source)

        separator = metadata.get('namespace_separator', DEFAULT_NAMESPACE_SEPARATOR)
        if not isinstance(separator, str) or not separator:
            raise RuleConfigurationError("'namespace_separator' must be a non-empty string", source)

        declared_root = metadata.get('root_namespace')
        if declared_root is not None and not isinstance(declared_root, str):
            raise RuleConfigurationError("'root_namespace' must be a string", source)

        rename = self._root_rewriter(declared_root, separator, source)

        raw_tables = data.get('suppress') or {}
        if not isinstance(raw_tables, Mapping):
            raise RuleConfigurationError("'suppress' must be a mapping", source)

        tables: Dict[str, Any] = {}
        for table_name, raw in raw_tables.items():
            if table_name not in RULE_TABLES:
                logger.warning(f"Skipping unknown rule table '{table_name}' in {source}")
                continue
            if table_name in FLAT_TABLES:
                tables[table_name] = self._parse_flat(table_name, raw, rename, source)
            else:
                tables[table_name] = self._parse_nested(table_name, raw, rename, source)

        return SuppressionRuleSet(
            namespace_separator=separator,
            root_namespace=(self.root_namespace or declared_root) if declared_root else None,
            source=source,
            **tables,
        )

    def _root_rewriter(self, declared_root: Optional[str], separator: str,
                       source: Optional[str]):
        """Return a function mapping names under the declared root onto the configured one"""
        target = self.root_namespace
        if not target or target == declared_root:
            return lambda name: name

        if not declared_root:
            logger.warning(
                f"Cannot apply root namespace '{target}': {source} declares no root_namespace"
            )
            return lambda name: name

        prefix = declared_root + separator

        def rename(name: str) -> str:
            if name == declared_root:
                return target
            if name.startswith(prefix):
                return target + separator + name[len(prefix):]
            return name

        return rename

    def _parse_flat(self, table_name: str, raw: Any, rename,
                    source: Optional[str]) -> Dict[str, List[str]]:
        """Parse {issue: [name, ...]}"""
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise RuleConfigurationError(f"table '{table_name}' must map issues to lists", source)

        table = {}
        for issue, names in raw.items():
            names = self._name_list(names, f"{table_name}.{issue}", source)
            table[str(issue)] = [rename(n) for n in names]
        return table

    def _parse_nested(self, table_name: str, raw: Any, rename,
                      source: Optional[str]) -> Dict[str, Dict[str, List[str]]]:
        """Parse {issue: {name: [member, ...]}}"""
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise RuleConfigurationError(f"table '{table_name}' must map issues to mappings", source)

        table = {}
        for issue, by_name in raw.items():
            if not isinstance(by_name, Mapping):
                raise RuleConfigurationError(
                    f"'{table_name}.{issue}' must map names to member lists", source
                )
            table[str(issue)] = {
                rename(str(name)): self._name_list(members, f"{table_name}.{issue}.{name}", source)
                for name, members in by_name.items()
            }
        return table

    @staticmethod
    def _name_list(value: Any, where: str, source: Optional[str]) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise RuleConfigurationError(f"'{where}' must be a list of strings", source)
        return list(value)

    @property
    def stats(self) -> Dict[str, Any]:
        """Get statistics about the loaded rule set"""
        if self.rule_set is None:
            return {'total_rules': 0, 'by_table': {}}

        by_table = {name: 0 for name in RULE_TABLES}
        for entry in self.rule_set.iter_rules():
            by_table[entry.table] += 1

        return {
            'total_rules': sum(by_table.values()),
            'by_table': by_table,
            'rules_file': str(self.rules_file),
        }


@functools.lru_cache(maxsize=None)
def get_default_rule_set() -> SuppressionRuleSet:
    """Bundled rule set, loaded once per process"""
    return RuleLoader().load()


def load_rule_set(rules_file: Optional[Union[str, Path]] = None,
                  root_namespace: Optional[str] = None) -> SuppressionRuleSet:
    """Load a rule set, reusing the cached bundled one when nothing is customised"""
    if rules_file is None and root_namespace is None:
        return get_default_rule_set()
    return RuleLoader(rules_file, root_namespace).load()
