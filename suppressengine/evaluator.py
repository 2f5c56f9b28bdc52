"""
Offline evaluation - runs the handler over class descriptions read from a file
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Union

import yaml

from .exceptions import ClassDescriptionError
from .handler import SuppressHandler
from .models import ClassLikeStorage, ClassReport, EvaluationResult

logger = logging.getLogger(__name__)


def read_class_entries(path: Union[str, Path]) -> List[Any]:
    """
    Read the raw class description entries from a YAML or JSON file.

    Files ending in .json are parsed as JSON, everything else as YAML. The
    document is either a list of descriptions or a mapping with a 'classes'
    list.
    """
    path = Path(path)
    source = str(path)
    is_json = path.suffix.lower() == '.json'

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f) if is_json else yaml.safe_load(f)
    except json.JSONDecodeError as e:
        raise ClassDescriptionError(f"invalid JSON: {e}", source) from e
    except yaml.YAMLError as e:
        raise ClassDescriptionError(f"invalid YAML: {e}", source) from e
    except OSError as e:
        raise ClassDescriptionError(f"cannot read class descriptions: {e}", source) from e

    if data is None:
        return []
    if isinstance(data, Mapping):
        data = data.get('classes') or []
    if not isinstance(data, list):
        raise ClassDescriptionError("expected a list of class descriptions", source)

    return data


def load_class_descriptions(path: Union[str, Path]) -> List[ClassLikeStorage]:
    """Read class descriptions, failing on the first malformed entry"""
    storages = [ClassLikeStorage.from_dict(entry) for entry in read_class_entries(path)]
    logger.info(f"Loaded {len(storages)} class descriptions from {Path(path).name}")
    return storages


def explain(handler: SuppressHandler, storage: ClassLikeStorage) -> ClassReport:
    """Apply the handler to storage and report what it added"""
    before = storage.suppression_state()
    handler.apply(storage)
    after = storage.suppression_state()

    added = {}
    for target, issues in after.items():
        new = [issue for issue in issues if issue not in before.get(target, [])]
        if new:
            added[target] = new

    return ClassReport(name=storage.name, added=added)


def evaluate(handler: SuppressHandler, storages: Iterable[ClassLikeStorage],
             source: str = "<memory>") -> EvaluationResult:
    """Apply the handler to every storage in order"""
    result = EvaluationResult(
        source=source,
        rules_file=handler.rules.source,
        rule_count=handler.rules.rule_count,
    )

    for storage in storages:
        result.reports.append(explain(handler, storage))

    logger.info(
        f"Applied {result.total_suppressions} suppressions across "
        f"{len(result.get_affected_classes())} of {len(result)} classes"
    )
    return result


def evaluate_file(handler: SuppressHandler, path: Union[str, Path]) -> EvaluationResult:
    """
    Evaluate every well-formed entry of a class descriptions file.

    Malformed entries are recorded in the result's errors and skipped; an
    unreadable file still raises ClassDescriptionError.
    """
    storages = []
    errors = []
    for index, entry in enumerate(read_class_entries(path), 1):
        try:
            storages.append(ClassLikeStorage.from_dict(entry))
        except ClassDescriptionError as e:
            logger.warning(f"Skipping class description #{index} in {path}: {e}")
            errors.append(f"entry #{index}: {e}")

    result = evaluate(handler, storages, source=str(path))
    result.errors.extend(errors)
    return result
