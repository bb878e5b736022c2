import re
from pathlib import Path
from typing import List, Optional, Sequence
from loguru import logger

from ..models.config import ScoringConfig, SetupConfig
from ..models.entities import Task
from ..models.errors import ScheduleNotFoundError, ScheduleReadError
from .estimator import classify_priority, estimate_points

DEFAULT_DURATION_HOURS = 4

# | dia | atividade | duração | entregável | prioridade |
ROW_RE = re.compile(
    r"^[ \t]*\|[ \t]*(\d+)[ \t]*\|([^|\n]*)\|([^|\n]*)\|([^|\n]*)\|([^|\n]*)\|[ \t\r]*$",
    re.MULTILINE,
)
DURATION_RE = re.compile(r"^(\d+)\s*[a-zA-Z]?$")

HEADER_LABELS = {"atividade", "activity"}


def parse_duration(cell: Optional[str]) -> int:
    """
    Converte a célula de duração em horas

    Aceita um inteiro com uma letra de unidade opcional no final ("4h", "8").
    Células vazias ou inválidas resultam na duração padrão.
    """
    match = DURATION_RE.match((cell or "").strip())
    if not match:
        return DEFAULT_DURATION_HOURS
    return int(match.group(1))


def _is_task_row(activity: str) -> bool:
    """Filtra cabeçalhos, separadores e atividades curtas demais"""
    if len(activity) <= 3:
        return False
    if activity.lower() in HEADER_LABELS:
        return False
    if "---" in activity:
        return False
    return True


def parse_schedule(text: str, scoring: ScoringConfig) -> List[Task]:
    """
    Extrai as tarefas das tabelas do cronograma

    Args:
        text: Conteúdo markdown do cronograma
        scoring: Regras de pontuação usadas na estimativa

    Returns:
        List[Task]: Tarefas na ordem do documento, ainda sem sprint
    """
    tasks = []
    for match in ROW_RE.finditer(text):
        day, activity, duration, deliverable, priority_text = (g.strip() for g in match.groups())

        if not _is_task_row(activity):
            logger.debug(f"Linha ignorada: {match.group(0).strip()}")
            continue

        hours = parse_duration(duration)
        priority = classify_priority(priority_text)
        task = Task(
            id=f"T{len(tasks) + 1:03d}",
            title=activity,
            duration_hours=hours,
            deliverable=deliverable,
            priority=priority,
            points=estimate_points(hours, priority, scoring),
            day_index=int(day),
        )
        tasks.append(task)

    logger.info(f"{len(tasks)} tarefas extraídas do cronograma")
    return tasks


def locate_schedule(candidates: Sequence[Path]) -> Path:
    """
    Retorna o primeiro caminho candidato que existe

    Raises:
        ScheduleNotFoundError: Nenhum dos caminhos existe
    """
    for path in candidates:
        if path.is_file():
            logger.info(f"Cronograma encontrado em: {path}")
            return path
        logger.debug(f"Cronograma não encontrado em: {path}")
    raise ScheduleNotFoundError(candidates)


def load_schedule(setup: SetupConfig, base_dir: Path) -> List[Task]:
    """Localiza, lê e interpreta o cronograma configurado"""
    path = locate_schedule(setup.schedule.candidates(base_dir))
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ScheduleReadError(f"Cronograma {path} não está em UTF-8: {e}") from e
    tasks = parse_schedule(text, setup.scoring)
    if not tasks:
        logger.warning(f"Nenhuma tarefa encontrada em {path}")
    return tasks
