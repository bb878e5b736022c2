from typing import Optional
from loguru import logger
from rich.console import Console
from rich.table import Table

from ..models.config import SetupConfig
from ..models.entities import Plan
from .base import Publisher, PublishResult


class DemoPublisher(Publisher):
    """Modo demonstração: mostra no console o que seria criado, sem chamadas de rede"""

    name = "demo"

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def publish(self, plan: Plan, setup: SetupConfig) -> PublishResult:
        sprints = Table(title=f"Sprints que seriam criadas - {setup.project.name}")
        sprints.add_column("Sprint")
        sprints.add_column("Período")
        sprints.add_column("Pontos", justify="right")
        sprints.add_column("Tarefas", justify="right")
        sprints.add_column("Objetivo")
        for sprint in plan.sprints:
            sprints.add_row(sprint.name, sprint.period, str(sprint.total_points), str(len(sprint.tasks)), sprint.goal)
        self.console.print(sprints)

        cards = Table(title="Cards que seriam criados")
        cards.add_column("Quadro")
        cards.add_column("Coluna")
        cards.add_column("ID")
        cards.add_column("Atividade")
        cards.add_column("Prioridade")
        cards.add_column("Pontos", justify="right")
        issues = []
        for board in plan.boards:
            for column in board.columns:
                for card in column.cards:
                    cards.add_row(board.name, column.name, card.task_id, card.title, card.priority.label, str(card.points))
                    issues.append(card.task_id)
        self.console.print(cards)

        logger.info("Modo demonstração: nenhuma alteração enviada ao backend")
        return PublishResult(
            backend=self.name,
            sprints=[s.name for s in plan.sprints],
            issues=issues,
            boards=[b.id for b in plan.boards],
            simulated=True,
        )
