from typing import Optional
import httpx
from loguru import logger

from ..models.config import GitProjectConfig, SetupConfig
from ..models.entities import KanbanBoard, Plan, Sprint
from ..models.errors import PublishError
from .base import HttpPublisher, PublishResult


class GitProjectPublisher(HttpPublisher):
    """Publica o plano na API do GitProject: projeto, sprints e quadros Kanban"""

    name = "gitproject"

    def __init__(self, config: GitProjectConfig, transport: Optional[httpx.BaseTransport] = None):
        if not config.token:
            raise PublishError("Credencial do GitProject ausente: GITPROJECT_TOKEN")
        self.config = config
        super().__init__(
            base_url=config.base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {config.token}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    def publish(self, plan: Plan, setup: SetupConfig) -> PublishResult:
        project = self._post("/projects", {
            "name": setup.project.name,
            "description": setup.project.description,
            "workspace_id": self.config.workspace_id,
            "settings": {
                "methodology": self.config.methodology,
                "sprint_duration": setup.sprints.duration_days,
            },
        })
        project_id = str(project["id"])
        logger.info(f"Projeto criado no GitProject: {project_id}")
        result = PublishResult(backend=self.name, project_id=project_id)

        for sprint in plan.sprints:
            self._post("/sprints", self._sprint_payload(sprint, project_id))
            result.sprints.append(sprint.name)
            logger.info(f"{sprint.name} criada")

        for board in plan.boards:
            self._post("/kanban-boards", self._board_payload(board, project_id))
            result.boards.append(board.id)
            logger.info(f"{board.name} criado")

        return result

    @staticmethod
    def _sprint_payload(sprint: Sprint, project_id: str) -> dict:
        return {
            "project_id": project_id,
            "name": sprint.name,
            "goal": sprint.goal,
            "start_date": sprint.start_date.isoformat(),
            "end_date": sprint.end_date.isoformat(),
            "planned_points": sprint.total_points,
        }

    @staticmethod
    def _board_payload(board: KanbanBoard, project_id: str) -> dict:
        return {
            "project_id": project_id,
            "name": board.name,
            "columns": [
                {"name": col.name, "color": col.color, "wip_limit": col.wip_limit}
                for col in board.columns
            ],
            "cards": [
                {
                    "title": card.title,
                    "description": card.description,
                    "story_points": card.points,
                    "priority": card.priority.value,
                    "checklist": card.checklist,
                    "column_name": col.name,
                }
                for col in board.columns
                for card in col.cards
            ],
        }
