import math
import re
import unicodedata
from loguru import logger

from ..models.config import ScoringConfig
from ..models.entities import Priority

# Marcadores coloridos usados nos cronogramas
PRIORITY_MARKERS = {
    "🔴": Priority.HIGH,
    "🟠": Priority.MEDIUM,
    "🟡": Priority.MEDIUM,
    "🟢": Priority.LOW,
}

PRIORITY_TOKENS = {
    "alta": Priority.HIGH,
    "high": Priority.HIGH,
    "media": Priority.MEDIUM,
    "medium": Priority.MEDIUM,
    "baixa": Priority.LOW,
    "low": Priority.LOW,
}

_WORD_RE = re.compile(r"[a-z]+")


def _strip_accents(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text)
    return "".join(c for c in normalized if not unicodedata.combining(c))


def classify_priority(text: str) -> Priority:
    """
    Converte o texto da coluna de prioridade em um nível de prioridade

    Reconhece marcadores coloridos (🔴 🟡 🟢) e as palavras alta/high,
    média/medium e baixa/low, sem diferenciar maiúsculas e acentos.
    Qualquer outro texto resulta em prioridade média.

    Args:
        text: Conteúdo da célula de prioridade

    Returns:
        Priority: Prioridade reconhecida
    """
    if not text:
        return Priority.MEDIUM

    for marker, priority in PRIORITY_MARKERS.items():
        if marker in text:
            return priority

    for word in _WORD_RE.findall(_strip_accents(text.lower())):
        if word in PRIORITY_TOKENS:
            return PRIORITY_TOKENS[word]

    return Priority.MEDIUM


def estimate_points(duration_hours: int, priority: Priority, scoring: ScoringConfig) -> int:
    """
    Estima os story points de uma tarefa

    Args:
        duration_hours: Duração da tarefa em horas
        priority: Prioridade da tarefa
        scoring: Regras de pontuação

    Returns:
        int: Valor presente na escala configurada
    """
    raw = math.ceil(duration_hours / scoring.hours_per_point)
    adjusted = max(1, raw + scoring.adjustment_for(priority))

    points = next((p for p in scoring.scale if p >= adjusted), scoring.scale[-1])
    if points < adjusted:
        logger.debug(f"Estimativa {adjusted} acima da escala, limitada a {points}")
    return points
