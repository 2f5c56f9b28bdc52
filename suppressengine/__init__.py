"""
laravel-suppress - Laravel convention suppressions for a static analyzer.

A host analyzer visits every class, interface and trait in a project. After
each visit it hands the populated class storage to SuppressHandler, which
marks issues that Laravel's conventions make unavoidable as suppressed:

    - framework-instantiated classes reported as unused (kernels, providers)
    - entry-point methods reported as unused (job handle(), mailable build())
    - properties the framework fills outside the constructor

Rules come from a YAML file (the bundled rules/laravel.yaml by default) and
are loaded once into an immutable SuppressionRuleSet.

Quick Start:
    >>> from suppressengine import ClassLikeStorage, SuppressHandler
    >>> storage = ClassLikeStorage(name='App\\Jobs\\SendInvoice')
    >>> SuppressHandler().apply(storage)
    >>> storage.suppressed_issues
    ['PropertyNotSetInConstructor', 'PossiblyUnusedMethod']
"""

__version__ = "0.3.0"
__author__ = "laravel-suppress"

from .exceptions import (
    SuppressEngineError,
    RuleConfigurationError,
    InvalidClassRecordError,
    ClassDescriptionError,
)
from .models import (
    ClassLikeRecord,
    SuppressibleRecord,
    ClassLikeStorage,
    MethodStorage,
    PropertyStorage,
    SuppressionRuleSet,
    RuleEntry,
    ClassReport,
    EvaluationResult,
)
from .rule_loader import RuleLoader, get_default_rule_set, load_rule_set
from .handler import SuppressHandler
from .hooks import AfterClassLikeVisitEvent, HookRegistry, Plugin
from .evaluator import evaluate, evaluate_file, explain, load_class_descriptions
from .reporters import ConsoleReporter, JSONReporter, get_reporter

__all__ = [
    # Errors
    'SuppressEngineError',
    'RuleConfigurationError',
    'InvalidClassRecordError',
    'ClassDescriptionError',
    # Records
    'ClassLikeRecord',
    'SuppressibleRecord',
    'ClassLikeStorage',
    'MethodStorage',
    'PropertyStorage',
    # Rules
    'SuppressionRuleSet',
    'RuleEntry',
    'RuleLoader',
    'get_default_rule_set',
    'load_rule_set',
    # Engine
    'SuppressHandler',
    'AfterClassLikeVisitEvent',
    'HookRegistry',
    'Plugin',
    # Offline evaluation
    'ClassReport',
    'EvaluationResult',
    'evaluate',
    'evaluate_file',
    'explain',
    'load_class_descriptions',
    'ConsoleReporter',
    'JSONReporter',
    'get_reporter',
]
