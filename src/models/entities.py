from datetime import date, datetime
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field

class Priority(str, Enum):
    """Níveis de prioridade de uma tarefa"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Peso usado na ordenação (maior primeiro)"""
        return {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}[self]

    @property
    def label(self) -> str:
        """Rótulo em português"""
        return {Priority.HIGH: "Alta", Priority.MEDIUM: "Média", Priority.LOW: "Baixa"}[self]

    @classmethod
    def from_key(cls, key: str) -> "Priority":
        """Converte uma chave de configuração (ex: "high", "alta", "média") em prioridade"""
        aliases = {
            "high": cls.HIGH, "alta": cls.HIGH,
            "medium": cls.MEDIUM, "media": cls.MEDIUM, "média": cls.MEDIUM,
            "low": cls.LOW, "baixa": cls.LOW,
        }
        try:
            return aliases[key.strip().lower()]
        except KeyError:
            raise ValueError(f"Prioridade desconhecida: {key}") from None

class Task(BaseModel):
    """Modelo de uma tarefa do cronograma"""
    id: str
    title: str
    duration_hours: int = Field(ge=0)
    deliverable: str
    priority: Priority = Priority.MEDIUM
    points: int = Field(ge=1)
    day_index: int
    sprint_number: Optional[int] = None

class Sprint:
    """Representa uma sprint do plano"""

    def __init__(self, number: int, name: str, start_date: date, end_date: date, goal: str = "", tasks: Optional[List[Task]] = None):
        self.number = number
        self.name = name
        self.goal = goal
        self.start_date = start_date
        self.end_date = end_date
        self.tasks: List[Task] = []
        for task in tasks or []:
            self.add_task(task)

    @property
    def total_points(self) -> int:
        """Soma dos story points das tarefas da sprint"""
        return sum(task.points for task in self.tasks)

    @property
    def period(self) -> str:
        """Período da sprint no formato usado nos relatórios"""
        return f"{self.start_date.isoformat()} a {self.end_date.isoformat()}"

    def add_task(self, task: Task) -> None:
        """Adiciona uma tarefa à sprint, registrando o número da sprint na tarefa"""
        if task.sprint_number is not None:
            raise ValueError(f"Tarefa {task.id} já alocada na sprint {task.sprint_number}")
        task.sprint_number = self.number
        self.tasks.append(task)

    def __repr__(self) -> str:
        return f"Sprint(number={self.number}, name={self.name!r}, tasks={len(self.tasks)}, points={self.total_points})"

class Card(BaseModel):
    """Card do Kanban, com uma cópia dos dados da tarefa"""
    id: str
    task_id: str
    title: str
    description: str
    points: int
    priority: Priority
    checklist: List[str] = Field(default_factory=list)

class Column(BaseModel):
    """Coluna de um quadro Kanban"""
    id: str
    name: str
    color: str
    wip_limit: Optional[int] = None
    is_backlog: bool = False
    cards: List[Card] = Field(default_factory=list)

class KanbanBoard(BaseModel):
    """Quadro Kanban de uma sprint"""
    id: str
    name: str
    sprint_number: int
    columns: List[Column] = Field(default_factory=list)

    @property
    def backlog_column(self) -> Optional[Column]:
        """Retorna a coluna de entrada (backlog) do quadro"""
        return next((c for c in self.columns if c.is_backlog), None)

    def all_cards(self) -> List[Card]:
        """Retorna todos os cards do quadro, na ordem das colunas"""
        cards = []
        for column in self.columns:
            cards.extend(column.cards)
        return cards

class Plan:
    """Resultado do pipeline: tarefas, sprints e quadros de uma execução"""

    def __init__(self, tasks: List[Task], sprints: List[Sprint], boards: List[KanbanBoard]):
        self.tasks = tasks
        self.sprints = sprints
        self.boards = boards

    @property
    def total_points(self) -> int:
        return sum(s.total_points for s in self.sprints)

    def board_for(self, sprint: Sprint) -> Optional[KanbanBoard]:
        """Retorna o quadro Kanban de uma sprint"""
        return next((b for b in self.boards if b.sprint_number == sprint.number), None)

class SprintSummary(BaseModel):
    """Resumo de uma sprint no relatório"""
    number: int
    name: str
    goal: str
    points: int
    tasks: int
    start_date: date
    end_date: date
    period: str

class ReportStatistics(BaseModel):
    """Totais do plano"""
    total_tasks: int = 0
    sprints: int = 0
    kanban_boards: int = 0
    total_cards: int = 0
    total_points: int = 0

class PlanReport(BaseModel):
    """Relatório final do plano"""
    generated_at: datetime
    project_name: str
    project_id: Optional[str] = None
    backend: Optional[str] = None
    statistics: ReportStatistics = Field(default_factory=ReportStatistics)
    sprints: List[SprintSummary] = Field(default_factory=list)
