"""
Семантический поиск по эмбеддингам задач.

Чистая функция над векторами: косинусное сходство запроса с каждым кандидатом,
сортировка по убыванию, при равенстве - более свежая задача выше, обрезка до top-K.
Кандидаты без вектора или с другой размерностью пропускаются.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
import logging
import uuid

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 10


@dataclass(frozen=True)
class EmbeddingCandidate:
    task_id: uuid.UUID
    vector: Optional[Sequence[float]]
    created_at: datetime


@dataclass(frozen=True)
class SearchHit:
    task_id: uuid.UUID
    score: float
    created_at: datetime


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> Optional[float]:
    """Косинусное сходство в [-1, 1]; None для нулевого вектора."""
    norm = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norm == 0.0:
        return None
    return float(np.clip(np.dot(a, b) / norm, -1.0, 1.0))


def search(
    query_vector: Sequence[float],
    candidates: Iterable[EmbeddingCandidate],
    top_k: int = DEFAULT_TOP_K,
    min_similarity: Optional[float] = None,
) -> List[SearchHit]:
    """
    Ранжирует кандидатов по сходству с запросом.

    Args:
        query_vector: Вектор поискового запроса
        candidates: Векторы задач одного владельца
        top_k: Максимальное число результатов
        min_similarity: Порог сходства; None - без порога

    Returns:
        Список SearchHit по убыванию score. Пустой список - нормальный исход.
    """
    query = np.asarray(query_vector, dtype=np.float64)
    if query.ndim != 1 or query.size == 0:
        return []

    hits: List[SearchHit] = []
    skipped = 0
    for candidate in candidates:
        if candidate.vector is None:
            skipped += 1
            continue
        vector = np.asarray(candidate.vector, dtype=np.float64)
        if vector.shape != query.shape:
            skipped += 1
            continue

        score = cosine_similarity(query, vector)
        if score is None:
            skipped += 1
            continue
        if min_similarity is not None and score < min_similarity:
            continue
        hits.append(SearchHit(task_id=candidate.task_id, score=score, created_at=candidate.created_at))

    if skipped:
        logger.debug(f"Пропущено {skipped} кандидатов без пригодного вектора")

    # Два стабильных прохода: сначала вторичный ключ, потом основной
    hits.sort(key=lambda hit: hit.created_at, reverse=True)
    hits.sort(key=lambda hit: hit.score, reverse=True)
    return hits[:max(top_k, 0)]
