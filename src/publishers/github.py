from typing import Dict, List, Optional
import httpx
from loguru import logger

from ..models.config import GitHubConfig, SetupConfig
from ..models.entities import Card, Column, Plan, Sprint
from ..models.errors import PublishError
from .base import HttpPublisher, PublishResult


class GitHubPublisher(HttpPublisher):
    """Publica o plano no GitHub: uma milestone por sprint e uma issue por card"""

    name = "github"

    def __init__(self, config: GitHubConfig, transport: Optional[httpx.BaseTransport] = None):
        """
        Inicializa o publicador do GitHub

        Args:
            config: Owner, repositório e token já resolvidos
            transport: Transporte httpx alternativo (usado nos testes)
        """
        missing = config.missing_credentials()
        if missing:
            raise PublishError(f"Credenciais do GitHub ausentes: {', '.join(missing)}")
        self.config = config
        self.repo_path = f"/repos/{config.owner}/{config.repo}"
        super().__init__(
            base_url=config.api_url,
            headers={
                "Authorization": f"token {config.token}",
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": "cronograma-sprints",
            },
            transport=transport,
        )
        logger.info(f"Cliente GitHub inicializado para {config.owner}/{config.repo}")

    def publish(self, plan: Plan, setup: SetupConfig) -> PublishResult:
        result = PublishResult(backend=self.name, project_id=f"{self.config.owner}/{self.config.repo}")

        milestones: Dict[int, int] = {}
        for sprint in plan.sprints:
            number = self._create_milestone(sprint, result)
            if number is not None:
                milestones[sprint.number] = number

        for board in plan.boards:
            for column in board.columns:
                for card in column.cards:
                    issue = self._create_issue(card, column, milestones.get(board.sprint_number))
                    result.issues.append(str(issue["number"]))
            result.boards.append(board.id)

        logger.info(f"GitHub: {len(result.sprints)} milestones e {len(result.issues)} issues criadas")
        return result

    def _create_milestone(self, sprint: Sprint, result: PublishResult) -> Optional[int]:
        """Cria a milestone da sprint; se já existir, reaproveita a existente"""
        payload = {
            "title": sprint.name,
            "description": f"🎯 {sprint.goal}\n\n📊 {sprint.total_points} pontos | 📝 {len(sprint.tasks)} tarefas",
            "due_on": f"{sprint.end_date.isoformat()}T23:59:59Z",
            "state": "open",
        }
        try:
            response = self.client.post(f"{self.repo_path}/milestones", json=payload)
        except httpx.HTTPError as e:
            raise PublishError(f"github: falha ao criar milestone {sprint.name}: {e}") from e
        if response.status_code == 422:
            logger.warning(f"Milestone já existe: {sprint.name}")
            result.skipped.append(sprint.name)
            return self._find_milestone(sprint.name)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PublishError(f"github: falha ao criar milestone {sprint.name} (status {response.status_code})") from e

        data = response.json()
        result.sprints.append(sprint.name)
        logger.info(f"Milestone criada: {sprint.name}")
        return data["number"]

    def _find_milestone(self, title: str) -> Optional[int]:
        milestones = self._request("GET", f"{self.repo_path}/milestones", params={"state": "all", "per_page": 100}).json()
        return next((m["number"] for m in milestones if m.get("title") == title), None)

    def _create_issue(self, card: Card, column: Column, milestone: Optional[int]) -> Dict:
        payload = {
            "title": f"[{card.task_id}] {card.title}",
            "body": self._issue_body(card),
            "labels": self._labels(card, column),
        }
        if milestone is not None:
            payload["milestone"] = milestone
        issue = self._post(f"{self.repo_path}/issues", payload)
        logger.debug(f"Issue #{issue['number']} criada para {card.task_id}")
        return issue

    @staticmethod
    def _issue_body(card: Card) -> str:
        lines = [card.description]
        if card.checklist:
            lines.append("")
            lines.append("### Checklist")
            lines.extend(f"- [ ] {item}" for item in card.checklist)
        return "\n".join(lines)

    @staticmethod
    def _labels(card: Card, column: Column) -> List[str]:
        return [f"prioridade: {card.priority.label.lower()}", f"pontos: {card.points}", column.name]
