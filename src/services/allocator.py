from collections import Counter
from datetime import date, timedelta
from typing import List, Tuple
from loguru import logger

from ..models.config import SprintsConfig
from ..models.entities import Task, Sprint

GOAL_PLACEHOLDER = "{main_features}"
MIN_KEYWORD_LENGTH = 5
GOAL_KEYWORDS = 3


def sprint_window(number: int, config: SprintsConfig) -> Tuple[date, date]:
    """
    Calcula o período de uma sprint

    A sprint N começa em início_projeto + (N-1) * duração e termina
    duração - 1 dias depois, de modo que sprints consecutivas são
    contíguas e não se sobrepõem.

    Args:
        number: Número da sprint (a partir de 1)
        config: Configuração das sprints

    Returns:
        Tuple[date, date]: Data de início e data de fim
    """
    start = config.project_start + timedelta(days=(number - 1) * config.duration_days)
    end = start + timedelta(days=config.duration_days - 1)
    return start, end


def extract_keywords(titles: List[str], limit: int = GOAL_KEYWORDS) -> List[str]:
    """Palavras mais frequentes (mais de 4 letras) dos títulos, da mais para a menos frequente"""
    words = " ".join(titles).lower().split()
    counter = Counter(w for w in words if len(w) >= MIN_KEYWORD_LENGTH)
    return [word for word, _ in counter.most_common(limit)]


def build_goal(tasks: List[Task], template: str) -> str:
    """Gera o objetivo da sprint a partir das palavras-chave das tarefas"""
    keywords = extract_keywords([t.title for t in tasks])
    return template.replace(GOAL_PLACEHOLDER, ", ".join(keywords))


class SprintAllocator:
    """Serviço responsável pela distribuição das tarefas em sprints"""

    def __init__(self, config: SprintsConfig, goal_template: str):
        """
        Inicializa o alocador

        Args:
            config: Capacidade, duração, início e prefixo das sprints
            goal_template: Template do objetivo com o marcador {main_features}
        """
        self.config = config
        self.goal_template = goal_template

    def allocate(self, tasks: List[Task]) -> List[Sprint]:
        """
        Distribui as tarefas em sprints, por prioridade

        As tarefas são ordenadas por prioridade (alta primeiro, mantendo a ordem
        do cronograma em caso de empate) e percorridas uma única vez. Quando a
        próxima tarefa estoura a capacidade e a sprint atual já tem tarefas, a
        sprint é fechada e uma nova é aberta. Uma tarefa maior que a capacidade
        fica sozinha em sua própria sprint.

        Args:
            tasks: Tarefas ainda não alocadas

        Returns:
            List[Sprint]: Sprints numeradas a partir de 1
        """
        capacity = self.config.capacity_points
        ordered = sorted(tasks, key=lambda t: t.priority.rank, reverse=True)

        sprints: List[Sprint] = []
        current: List[Task] = []
        current_points = 0

        for task in ordered:
            if current and current_points + task.points > capacity:
                sprints.append(self._close_sprint(len(sprints) + 1, current))
                current = []
                current_points = 0

            if task.points > capacity:
                logger.warning(
                    f"Tarefa {task.id} ({task.points} pontos) excede a capacidade de {capacity} pontos e ficará sozinha na sprint"
                )
            current.append(task)
            current_points += task.points

        if current:
            sprints.append(self._close_sprint(len(sprints) + 1, current))

        logger.info(f"{len(sprints)} sprints organizadas")
        return sprints

    def _close_sprint(self, number: int, tasks: List[Task]) -> Sprint:
        """Cria a sprint com período, nome e objetivo"""
        start, end = sprint_window(number, self.config)
        sprint = Sprint(
            number=number,
            name=f"{self.config.prefix} {number}",
            start_date=start,
            end_date=end,
            goal=build_goal(tasks, self.goal_template),
        )
        for task in tasks:
            sprint.add_task(task)

        logger.info(f"{sprint.name}: {len(sprint.tasks)} tarefas, {sprint.total_points} pontos ({sprint.period})")
        return sprint


def allocate_sprints(tasks: List[Task], config: SprintsConfig, goal_template: str) -> List[Sprint]:
    """Atalho para SprintAllocator(config, goal_template).allocate(tasks)"""
    return SprintAllocator(config, goal_template).allocate(tasks)
