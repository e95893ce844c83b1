"""
Нормализация ответа модели в список подзадач.

Модель может вернуть:
- JSON массив строк;
- тот же массив, обёрнутый в ```json ... ```;
- JSON объект с массивом под ключом subtasks, tasks или любым другим;
- произвольный текст, из которого список не извлекается.

Сначала снимается markdown-ограда, затем текст строго парсится как JSON,
после чего по очереди пробуются стратегии извлечения. Каждая стратегия
возвращает Extraction (успех или причина отказа) и тестируется отдельно.
Количество пунктов не проверяется - гарантируется только форма списка.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple
import json
import logging
import re

from app.core.errors import MalformedResponse

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```[\w+-]*[ \t]*\r?\n?")
_FENCE_CLOSE = re.compile(r"\r?\n?```\s*$")

PREFERRED_KEYS = ("subtasks", "tasks")


@dataclass(frozen=True)
class Extraction:
    items: Optional[List[str]] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.items is not None

    @classmethod
    def success(cls, items: List[str]) -> "Extraction":
        return cls(items=items)

    @classmethod
    def failure(cls, reason: str) -> "Extraction":
        return cls(reason=reason)


Strategy = Callable[[Any], Extraction]


def strip_code_fence(text: str) -> str:
    """Снимает ведущую и замыкающую ``` ограду (с тегом языка или без)."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
        cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_json(text: str) -> Tuple[bool, Any]:
    """Строгий парсинг. Возвращает (успех, значение)."""
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return False, None


def clean_items(value: Any) -> Optional[List[str]]:
    """
    Массив строк -> обрезанные непустые строки в исходном порядке.
    None, если это не массив строк или после очистки ничего не осталось.
    Дубликаты сохраняются.
    """
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    items = [item.strip() for item in value if item.strip()]
    return items or None


def array_of_strings(value: Any) -> Extraction:
    items = clean_items(value)
    if items is None:
        return Extraction.failure("value is not a non-empty array of strings")
    return Extraction.success(items)


def preferred_key_array(value: Any) -> Extraction:
    if not isinstance(value, dict):
        return Extraction.failure("value is not an object")
    for key in PREFERRED_KEYS:
        items = clean_items(value.get(key))
        if items is not None:
            return Extraction.success(items)
    return Extraction.failure(f"no array of strings under {', '.join(PREFERRED_KEYS)}")


def first_array_value(value: Any) -> Extraction:
    if not isinstance(value, dict):
        return Extraction.failure("value is not an object")
    # dict сохраняет порядок ключей из JSON
    for item in value.values():
        items = clean_items(item)
        if items is not None:
            return Extraction.success(items)
    return Extraction.failure("object has no array of strings among its values")


DEFAULT_STRATEGIES: Tuple[Strategy, ...] = (
    array_of_strings,
    preferred_key_array,
    first_array_value,
)


class SubtaskNormalizer:
    """Извлекает список подзадач из сырого текста модели."""

    def __init__(self, strategies: Sequence[Strategy] = DEFAULT_STRATEGIES):
        self.strategies = tuple(strategies)

    def normalize(self, raw_text: str) -> List[str]:
        if not raw_text or not raw_text.strip():
            raise MalformedResponse("Empty response from model", raw_text=raw_text or "")

        ok, parsed = parse_json(strip_code_fence(raw_text))
        if not ok:
            raise MalformedResponse("Response is not valid JSON", raw_text=raw_text)

        reasons = []
        for strategy in self.strategies:
            result = strategy(parsed)
            if result.ok:
                return result.items
            reasons.append(f"{strategy.__name__}: {result.reason}")

        logger.debug("Стратегии извлечения не сработали: %s", "; ".join(reasons))
        raise MalformedResponse("Response does not contain an array of subtasks", raw_text=raw_text)


_default_normalizer = SubtaskNormalizer()


def normalize(raw_text: str) -> List[str]:
    """Нормализация стандартной цепочкой стратегий"""
    return _default_normalizer.normalize(raw_text)
