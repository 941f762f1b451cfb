"""
Category Strategy Registry Tests
"""

import pytest

from pattern_engine.category_registry import (
    GENERIC_STRATEGY,
    CategoryRegistry,
    CategoryStrategy,
    create_registry,
)

SLEEP_YAML = """
categories:
  sleep:
    recovery_title: Sleep Reset Protocol
    recovery_actions:
      - Fixed wake time every day
      - No screens after 22:00
    recovery_basis: Regular sleep timing improves sleep quality.
    recovery_reason: "Your sleep pillar is at {score:.0f}."
    optimization_actions:
      - Track sleep stages
"""


def make_strategy(category="sleep", reason="Your {category} pillar is at {score:.0f}."):
    return CategoryStrategy(
        category=category,
        recovery_title="Sleep Reset Protocol",
        recovery_actions=("Fixed wake time",),
        recovery_basis="Basis",
        recovery_reason=reason,
        optimization_actions=("Track sleep stages",),
    )


class TestCategoryStrategy:

    def test_empty_category_rejected(self):
        with pytest.raises(ValueError):
            make_strategy(category="")

    def test_actions_must_be_non_empty_tuples(self):
        with pytest.raises(ValueError):
            CategoryStrategy("sleep", "t", (), "b", "r", ("x",))
        with pytest.raises(ValueError):
            CategoryStrategy("sleep", "t", ("x",), "b", "r", ["x"])

    def test_render_reason(self, make_pattern):
        strategy = make_strategy()
        assert strategy.render_reason(make_pattern(category="sleep", score=48.0)) == (
            "Your sleep pillar is at 48."
        )

    def test_bad_template_returns_raw_text(self, make_pattern):
        strategy = make_strategy(reason="Your {unknown} is off")
        assert strategy.render_reason(make_pattern()) == "Your {unknown} is off"

    def test_built_in_reason_templates(self, make_pattern):
        registry = CategoryRegistry()
        heart = registry.get("heart").render_reason(make_pattern(category="heart", score=62.0))
        assert "can improve by 28 points" in heart
        diet = registry.get("diet").render_reason(make_pattern(category="diet", score=60.0))
        assert "by 25 points" in diet
        mind = registry.get("mind").render_reason(make_pattern(category="mind", consistency=0.2))
        assert "shows inconsistent patterns" in mind


class TestCategoryRegistry:

    def test_built_in_categories(self):
        assert CategoryRegistry().categories == ["body", "diet", "heart", "mind", "spirit"]

    def test_unknown_category_falls_back(self):
        registry = CategoryRegistry()
        assert registry.get("sleep") is GENERIC_STRATEGY
        assert not registry.has("sleep")

    def test_register(self):
        registry = CategoryRegistry()
        registry.register(make_strategy())
        assert registry.has("sleep")
        assert registry.get("sleep").recovery_title == "Sleep Reset Protocol"

    def test_register_replaces(self):
        registry = CategoryRegistry()
        registry.register(make_strategy(category="body"))
        assert registry.get("body").recovery_title == "Sleep Reset Protocol"

    def test_empty_registry(self):
        registry = CategoryRegistry(strategies=())
        assert registry.categories == []
        assert registry.get("body") is GENERIC_STRATEGY


class TestYamlStrategies:

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "strategies.yaml"
        path.write_text(SLEEP_YAML)
        registry = CategoryRegistry()
        assert registry.load_yaml(path) == 1
        strategy = registry.get("sleep")
        assert strategy.recovery_actions == ("Fixed wake time every day", "No screens after 22:00")

    def test_create_registry_with_file(self, tmp_path):
        path = tmp_path / "strategies.yaml"
        path.write_text(SLEEP_YAML)
        registry = create_registry(str(path))
        assert "sleep" in registry.categories
        assert "body" in registry.categories

    def test_create_registry_without_file(self):
        assert create_registry().categories == CategoryRegistry().categories

    @pytest.mark.parametrize("content", [
        "",
        "- a list\n",
        "categories: 5\n",
        "categories:\n  sleep: nope\n",
        "categories:\n  sleep:\n    recovery_title: Missing fields\n",
    ])
    def test_malformed_files(self, tmp_path, content):
        path = tmp_path / "strategies.yaml"
        path.write_text(content)
        with pytest.raises(ValueError):
            CategoryRegistry().load_yaml(path)
