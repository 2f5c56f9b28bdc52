"""Tests for suppressengine.rule_loader"""

import dataclasses
import pytest
from suppressengine.exceptions import RuleConfigurationError
from suppressengine.rule_loader import (
    DEFAULT_RULES_FILE, RuleLoader, get_default_rule_set, load_rule_set,
)


class TestBundledRules:
    def test_bundled_file_exists(self):
        assert DEFAULT_RULES_FILE.is_file()

    def test_tables_loaded(self, default_rules):
        assert r"App\Http\Kernel" in default_rules.by_class["UnusedClass"]
        assert len(default_rules.by_class["UnusedClass"]) == 10
        assert default_rules.by_class_method["PossiblyUnusedMethod"][
            r"App\Http\Middleware\RedirectIfAuthenticated"
        ] == ("handle",)
        assert default_rules.by_namespace["PossiblyUnusedMethod"] == (r"App\Events", r"App\Jobs")
        assert default_rules.by_namespace_method["PossiblyUnusedMethod"][r"App\Mail"] == (
            "__construct", "build",
        )
        assert r"Illuminate\Mail\Mailable" in default_rules.by_parent_class["PropertyNotSetInConstructor"]
        assert default_rules.by_parent_class_property["NonInvariantDocblockPropertyType"] == {
            r"Illuminate\Console\Command": ("description",),
        }
        assert default_rules.by_used_trait["PropertyNotSetInConstructor"] == (
            r"Illuminate\Queue\InteractsWithQueue",
        )

    def test_separator_and_root(self, default_rules):
        assert default_rules.namespace_separator == "\\"
        assert default_rules.root_namespace == "App"

    def test_default_rule_set_is_cached(self):
        assert get_default_rule_set() is get_default_rule_set()
        assert load_rule_set() is get_default_rule_set()

    def test_stats(self):
        loader = RuleLoader()
        loader.load()
        stats = loader.stats
        assert stats["by_table"]["by_class"] == 10
        assert stats["by_table"]["by_namespace"] == 3
        assert stats["by_table"]["by_namespace_method"] == 4
        assert stats["total_rules"] == sum(stats["by_table"].values())

    def test_stats_before_load(self):
        assert RuleLoader().stats["total_rules"] == 0


class TestImmutability:
    def test_tables_cannot_be_modified(self, default_rules):
        with pytest.raises(TypeError):
            default_rules.by_class["UnusedClass"] = ()

    def test_nested_tables_cannot_be_modified(self, default_rules):
        with pytest.raises(TypeError):
            default_rules.by_namespace_method["PossiblyUnusedMethod"]["App\\Console"] = ("handle",)

    def test_fields_cannot_be_reassigned(self, default_rules):
        with pytest.raises(dataclasses.FrozenInstanceError):
            default_rules.namespace_separator = "."


class TestRootNamespaceRewrite:
    def test_rewrites_app_names(self):
        rules = RuleLoader(root_namespace="Acme").load()
        assert r"Acme\Http\Kernel" in rules.by_class["UnusedClass"]
        assert r"App\Http\Kernel" not in rules.by_class["UnusedClass"]
        assert rules.by_namespace["PropertyNotSetInConstructor"] == (r"Acme\Jobs",)
        assert r"Acme\Notifications" in rules.by_namespace_method["PossiblyUnusedMethod"]
        assert rules.root_namespace == "Acme"

    def test_framework_names_untouched(self):
        rules = RuleLoader(root_namespace="Acme").load()
        assert r"Illuminate\Console\Command" in rules.by_parent_class["PropertyNotSetInConstructor"]

    def test_same_root_is_noop(self, default_rules):
        rules = RuleLoader(root_namespace="App").load()
        assert list(rules.iter_rules()) == list(default_rules.iter_rules())

    def test_dotted_rewrite(self, fixtures_dir):
        rules = RuleLoader(fixtures_dir / "dotted_rules.yaml", root_namespace="Shop").load()
        assert rules.by_class["UnusedClass"] == ("Shop.Http.Kernel",)
        assert rules.by_parent_class["PropertyNotSetInConstructor"] == ("Illuminate.Console.Command",)

    def test_no_declared_root_leaves_names(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("suppress:\n  by_class:\n    UnusedClass: [App\\Http\\Kernel]\n")
        rules = RuleLoader(path, root_namespace="Acme").load()
        assert rules.by_class["UnusedClass"] == ("App\\Http\\Kernel",)


class TestCustomFiles:
    def test_dotted_separator(self, dotted_rules):
        assert dotted_rules.namespace_separator == "."
        assert dotted_rules.by_namespace["PropertyNotSetInConstructor"] == ("App.Jobs", "App.Jobs.Billing")

    def test_single_name_becomes_list(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("suppress:\n  by_used_trait:\n    PropertyNotSetInConstructor: Some\\Trait\n")
        rules = RuleLoader(path).load()
        assert rules.by_used_trait["PropertyNotSetInConstructor"] == ("Some\\Trait",)

    def test_unknown_table_skipped(self, tmp_path, caplog):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "suppress:\n"
            "  by_annotation:\n    UnusedClass: [Foo]\n"
            "  by_class:\n    UnusedClass: [Bar]\n"
        )
        rules = RuleLoader(path).load()
        assert rules.by_class["UnusedClass"] == ("Bar",)
        assert "by_annotation" in caplog.text

    def test_empty_file_gives_empty_rule_set(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("")
        rules = RuleLoader(path).load()
        assert rules.is_empty

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleConfigurationError, match="not found"):
            RuleLoader(tmp_path / "missing.yaml").load()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("{{invalid yaml content")
        with pytest.raises(RuleConfigurationError, match="invalid YAML"):
            RuleLoader(path).load()

    def test_top_level_list_rejected(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("- UnusedClass\n")
        with pytest.raises(RuleConfigurationError):
            RuleLoader(path).load()

    def test_flat_table_with_mapping_values_rejected(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("suppress:\n  by_class:\n    UnusedClass:\n      Foo: [bar]\n")
        with pytest.raises(RuleConfigurationError, match="by_class.UnusedClass"):
            RuleLoader(path).load()

    def test_nested_table_with_list_rejected(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("suppress:\n  by_class_method:\n    PossiblyUnusedMethod: [Foo]\n")
        with pytest.raises(RuleConfigurationError, match="by_class_method.PossiblyUnusedMethod"):
            RuleLoader(path).load()

    def test_empty_separator_rejected(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("metadata:\n  namespace_separator: ''\n")
        with pytest.raises(RuleConfigurationError, match="namespace_separator"):
            RuleLoader(path).load()

    def test_error_carries_source(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("suppress: [by_class]\n")
        with pytest.raises(RuleConfigurationError) as exc_info:
            RuleLoader(path).load()
        assert exc_info.value.source == str(path)
