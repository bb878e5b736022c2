import re
from typing import List
from loguru import logger

from ..models.config import KanbanConfig, TemplatesConfig
from ..models.entities import Card, Column, KanbanBoard, Sprint, Task
from ..models.errors import ConfigurationError


def column_id(name: str) -> str:
    """Identificador da coluna a partir do nome (ex: "Em Progresso" -> "COL_EM_PROGRESSO")"""
    slug = re.sub(r"\W+", "_", name.strip(), flags=re.UNICODE).strip("_").upper()
    return f"COL_{slug}"


def render_template(template: str, **values) -> str:
    """Substitui os marcadores {nome} presentes no template, mantendo os desconhecidos"""
    text = template
    for key, value in values.items():
        text = text.replace("{" + key + "}", str(value))
    return text


class KanbanBoardBuilder:
    """Serviço responsável pela criação dos quadros Kanban das sprints"""

    def __init__(self, kanban: KanbanConfig, templates: TemplatesConfig):
        self.kanban = kanban
        self.templates = templates

    def _new_columns(self) -> List[Column]:
        return [
            Column(
                id=column_id(c.name),
                name=c.name,
                color=c.color,
                wip_limit=c.wip_limit,
                is_backlog=c.is_backlog,
            )
            for c in self.kanban.columns
        ]

    def _build_card(self, task: Task, sprint: Sprint) -> Card:
        description = render_template(
            self.templates.card_description,
            deliverable=task.deliverable,
            sprint=sprint.name,
            points=task.points,
            priority=task.priority.label,
            task_id=task.id,
        )
        return Card(
            id=f"CARD_{task.id}",
            task_id=task.id,
            title=task.title,
            description=description,
            points=task.points,
            priority=task.priority,
            checklist=list(self.templates.checklist),
        )

    def build(self, sprint: Sprint) -> KanbanBoard:
        """
        Cria o quadro Kanban de uma sprint

        Args:
            sprint: Sprint já alocada

        Returns:
            KanbanBoard: Quadro com um card por tarefa na coluna de backlog

        Raises:
            ConfigurationError: Nenhuma coluna marcada como backlog
        """
        board = KanbanBoard(
            id=f"KB_{sprint.number:02d}",
            name=f"{sprint.name} - Kanban",
            sprint_number=sprint.number,
            columns=self._new_columns(),
        )

        backlog = board.backlog_column
        if backlog is None:
            raise ConfigurationError("Nenhuma coluna do Kanban está marcada como backlog")

        for task in sprint.tasks:
            backlog.cards.append(self._build_card(task, sprint))

        if backlog.wip_limit is not None and len(backlog.cards) > backlog.wip_limit:
            logger.warning(
                f"{board.name}: coluna '{backlog.name}' com {len(backlog.cards)} cards excede o limite WIP de {backlog.wip_limit}"
            )
        return board

    def build_all(self, sprints: List[Sprint]) -> List[KanbanBoard]:
        """Cria um quadro por sprint"""
        boards = [self.build(sprint) for sprint in sprints]
        logger.info(f"{len(boards)} quadros Kanban criados")
        return boards


def build_boards(sprints: List[Sprint], kanban: KanbanConfig, templates: TemplatesConfig) -> List[KanbanBoard]:
    return KanbanBoardBuilder(kanban, templates).build_all(sprints)
