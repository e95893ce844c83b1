"""
Тесты нормализатора ответа модели: цепочка стратегий и каждая стратегия отдельно.
"""

import json

import pytest

from app.core.errors import MalformedResponse
from app.services.subtask_normalizer import (
    SubtaskNormalizer,
    array_of_strings,
    first_array_value,
    normalize,
    parse_json,
    preferred_key_array,
    strip_code_fence,
)


class TestNormalizeScenarios:
    """Сценарии из реальных ответов модели"""

    def test_fenced_json_array(self):
        raw = "```json\n[\"Buy flour\", \"Preheat oven\", \"Bake\"]\n```"
        assert normalize(raw) == ["Buy flour", "Preheat oven", "Bake"]

    def test_refusal_text_fails(self):
        with pytest.raises(MalformedResponse) as exc_info:
            normalize("Sorry, I can't help with that.")
        assert exc_info.value.raw_text == "Sorry, I can't help with that."

    @pytest.mark.parametrize("items", [
        ["Only one step"],
        ["Draft outline", "Write intro", "Review"],
        [f"Step {i}" for i in range(1, 11)],
    ])
    def test_plain_array_returned_as_is(self, items):
        # Количество пунктов не ограничивается
        assert normalize(json.dumps(items)) == items

    def test_fence_is_noop_on_content(self):
        items = ["Call the bank", "Fill the form"]
        plain = json.dumps(items)
        assert normalize(f"```\n{plain}\n```") == normalize(plain)
        assert normalize(f"```json\n{plain}\n```") == normalize(plain)
        assert normalize(f"```json {plain}```") == normalize(plain)

    @pytest.mark.parametrize("key", ["subtasks", "tasks", "anythingElse"])
    def test_object_with_single_array_key(self, key):
        raw = json.dumps({key: ["Pack bags", "Book taxi"]})
        assert normalize(raw) == ["Pack bags", "Book taxi"]

    def test_object_prefers_subtasks_key(self):
        raw = json.dumps({"notes": ["ignore me"], "subtasks": ["Use me"]})
        assert normalize(raw) == ["Use me"]

    def test_object_first_array_in_key_order(self):
        raw = '{"title": "Trip", "count": 2, "steps": ["First"], "extra": ["Second"]}'
        assert normalize(raw) == ["First"]

    def test_items_are_trimmed_and_empty_dropped(self):
        raw = json.dumps(["  Wash car  ", "", "   ", "Dry car"])
        assert normalize(raw) == ["Wash car", "Dry car"]

    def test_duplicates_are_kept(self):
        raw = json.dumps(["Check email", "Check email"])
        assert normalize(raw) == ["Check email", "Check email"]


class TestNormalizeFailures:
    """Нераспознаваемые ответы никогда не превращаются в пустой список"""

    @pytest.mark.parametrize("raw", [
        "",
        "   ",
        "1. Buy flour\n2. Bake",
        "```json\n{not json}\n```",
        "[]",
        '["", "   "]',
        '{"subtasks": []}',
        '{"title": "no arrays here"}',
        '[1, 2, 3]',
        '["ok", 2]',
        '"just a string"',
        "null",
        "42",
    ])
    def test_malformed(self, raw):
        with pytest.raises(MalformedResponse) as exc_info:
            normalize(raw)
        assert exc_info.value.raw_text == raw

    def test_deeply_nested_json(self):
        raw = "[" * 100000 + "]" * 100000
        with pytest.raises(MalformedResponse) as exc_info:
            normalize(raw)
        assert exc_info.value.raw_text == raw


class TestStrategies:
    """Каждая стратегия проверяется независимо от цепочки"""

    def test_strip_code_fence(self):
        assert strip_code_fence("```python\n[1]\n```") == "[1]"
        assert strip_code_fence("  [1]  ") == "[1]"
        assert strip_code_fence("```\n[\"a\"]```") == "[\"a\"]"

    def test_parse_json(self):
        assert parse_json('["a"]') == (True, ["a"])
        assert parse_json("nope") == (False, None)

    def test_array_of_strings(self):
        assert array_of_strings(["a", " b "]).items == ["a", "b"]
        assert not array_of_strings({"a": ["b"]}).ok
        assert not array_of_strings(["a", None]).ok

    def test_preferred_key_array(self):
        assert preferred_key_array({"tasks": ["x"]}).items == ["x"]
        assert preferred_key_array({"tasks": ["x"], "subtasks": ["y"]}).items == ["y"]
        result = preferred_key_array({"steps": ["x"]})
        assert not result.ok
        assert "subtasks" in result.reason

    def test_first_array_value(self):
        assert first_array_value({"a": "text", "b": ["x"], "c": ["y"]}).items == ["x"]
        assert not first_array_value(["x"]).ok

    def test_custom_strategy_chain(self):
        normalizer = SubtaskNormalizer(strategies=[first_array_value])
        # Без стратегии для массива верхнего уровня голый массив не принимается
        with pytest.raises(MalformedResponse):
            normalizer.normalize('["a"]')
        assert normalizer.normalize('{"k": ["a"]}') == ["a"]
