"""Shared test fixtures for the laravel-suppress test suite."""

import sys
import pytest
from pathlib import Path

# Ensure suppressengine is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from suppressengine.handler import SuppressHandler
from suppressengine.models import ClassLikeStorage
from suppressengine.rule_loader import RuleLoader, get_default_rule_set

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def default_rules():
    """The bundled Laravel rule set."""
    return get_default_rule_set()


@pytest.fixture
def handler(default_rules):
    """A handler using the bundled rules."""
    return SuppressHandler(default_rules)


@pytest.fixture
def dotted_rules(fixtures_dir):
    """A small rule set using '.' as the namespace separator."""
    return RuleLoader(fixtures_dir / "dotted_rules.yaml").load()


@pytest.fixture
def make_storage():
    """Factory for class storage with optional methods and properties."""
    def _make(name, parents=(), traits=(), methods=(), properties=(), suppressed=()):
        storage = ClassLikeStorage(
            name=name,
            parent_classes=list(parents),
            used_traits=list(traits),
            suppressed_issues=list(suppressed),
        )
        for method in methods:
            storage.add_method(method)
        for prop in properties:
            storage.add_property(prop)
        return storage
    return _make


@pytest.fixture
def job_storage(make_storage):
    """A queued job in the App\\Jobs namespace."""
    return make_storage(
        r"App\Jobs\SendInvoice",
        traits=[r"Illuminate\Queue\InteractsWithQueue", r"Illuminate\Bus\Queueable"],
        methods=["__construct", "handle", "failed"],
        properties=["invoice"],
    )


@pytest.fixture
def command_storage(make_storage):
    """An artisan console command."""
    return make_storage(
        r"App\Console\Commands\PruneInvoices",
        parents=[r"Illuminate\Console\Command"],
        methods=["handle"],
        properties=["signature", "description"],
    )


@pytest.fixture
def classes_file(fixtures_dir, tmp_path):
    """Copy of the sample class descriptions file."""
    content = (fixtures_dir / "classes.yaml").read_text()
    target = tmp_path / "classes.yaml"
    target.write_text(content)
    return target


@pytest.fixture
def rules_file(fixtures_dir, tmp_path):
    """Copy of the dotted rules file."""
    content = (fixtures_dir / "dotted_rules.yaml").read_text()
    target = tmp_path / "rules.yaml"
    target.write_text(content)
    return target
