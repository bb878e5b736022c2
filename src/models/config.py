import json
import os
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .entities import Priority
from .errors import ConfigurationError


class ProjectConfig(BaseModel):
    """Dados do projeto"""

    name: str
    description: str = ""


class ScheduleConfig(BaseModel):
    """Localização do cronograma"""

    file: str
    fallback_files: List[str] = Field(default_factory=list)

    def candidates(self, base_dir: Path) -> List[Path]:
        """Caminhos candidatos ao cronograma, na ordem de busca"""
        return [(base_dir / f).resolve() for f in [self.file, *self.fallback_files]]


class SprintsConfig(BaseModel):
    """Configuração das sprints"""

    capacity_points: int = Field(gt=0)
    duration_days: int = Field(gt=0)
    project_start: date
    prefix: str = "Sprint"

    @field_validator("project_start", mode="before")
    @classmethod
    def validate_date(cls, v):
        """Valida e converte a string de data para date"""
        if isinstance(v, str):
            try:
                return datetime.strptime(v, "%Y-%m-%d").date()
            except ValueError as e:
                raise ValueError(f"Data inválida: {v}. Formato esperado: YYYY-MM-DD") from e
        return v


class ScoringConfig(BaseModel):
    """Regras de pontuação (story points)"""

    hours_per_point: int = Field(gt=0)
    scale: List[int] = Field(min_length=1)
    priority_adjustment: Dict[Priority, int] = Field(default_factory=dict)

    @field_validator("scale")
    @classmethod
    def validate_scale(cls, v: List[int]) -> List[int]:
        """A escala deve ser estritamente crescente e com valores positivos"""
        if any(p < 1 for p in v):
            raise ValueError("A escala de pontos só aceita valores >= 1")
        if any(a >= b for a, b in zip(v, v[1:])):
            raise ValueError(f"A escala de pontos deve ser crescente: {v}")
        return v

    @field_validator("priority_adjustment", mode="before")
    @classmethod
    def normalize_priority_keys(cls, v):
        """Aceita chaves em português ("alta", "media", "baixa") ou inglês"""
        if isinstance(v, dict):
            return {Priority.from_key(str(k)): ajuste for k, ajuste in v.items()}
        return v

    def adjustment_for(self, priority: Priority) -> int:
        return self.priority_adjustment.get(priority, 0)


class ColumnConfig(BaseModel):
    """Modelo de coluna do Kanban"""

    name: str
    color: str = "#6c757d"
    wip_limit: Optional[int] = Field(default=None, ge=1)
    is_backlog: bool = False


class KanbanConfig(BaseModel):
    """Modelo de colunas dos quadros Kanban"""

    columns: List[ColumnConfig] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_backlog(self) -> "KanbanConfig":
        """Exige exatamente uma coluna marcada como backlog"""
        backlog = [c.name for c in self.columns if c.is_backlog]
        if len(backlog) != 1:
            raise ValueError(
                f"O modelo Kanban precisa de exatamente uma coluna com is_backlog=true (encontradas: {backlog or 'nenhuma'})"
            )
        return self


class TemplatesConfig(BaseModel):
    """Templates de texto"""

    sprint_goal: str
    card_description: str
    checklist: List[str] = Field(default_factory=list)


class GitHubConfig(BaseModel):
    """Configuração do GitHub (milestones e issues)"""

    owner: Optional[str] = None
    repo: Optional[str] = None
    token: Optional[str] = None
    api_url: str = "https://api.github.com"

    def resolve_credentials(self) -> "GitHubConfig":
        """Completa os campos ausentes com GITHUB_TOKEN, GITHUB_OWNER e GITHUB_REPO"""
        return self.model_copy(update={
            "owner": self.owner or os.environ.get("GITHUB_OWNER"),
            "repo": self.repo or os.environ.get("GITHUB_REPO"),
            "token": self.token or os.environ.get("GITHUB_TOKEN"),
        })

    def missing_credentials(self) -> List[str]:
        missing = []
        if not self.token:
            missing.append("GITHUB_TOKEN")
        if not self.owner:
            missing.append("GITHUB_OWNER")
        if not self.repo:
            missing.append("GITHUB_REPO")
        return missing


class GitProjectConfig(BaseModel):
    """Configuração do GitProject"""

    base_url: str
    token: Optional[str] = None
    workspace_id: Optional[str] = None
    methodology: str = "scrum"

    def resolve_credentials(self) -> "GitProjectConfig":
        """Completa os campos ausentes com GITPROJECT_TOKEN e GITPROJECT_WORKSPACE_ID"""
        return self.model_copy(update={
            "token": self.token or os.environ.get("GITPROJECT_TOKEN"),
            "workspace_id": self.workspace_id or os.environ.get("GITPROJECT_WORKSPACE_ID"),
        })

    def missing_credentials(self) -> List[str]:
        return [] if self.token else ["GITPROJECT_TOKEN"]


class SetupConfig(BaseModel):
    """Configuração principal do sistema"""

    project: ProjectConfig
    schedule: ScheduleConfig
    sprints: SprintsConfig
    scoring: ScoringConfig
    kanban: KanbanConfig
    templates: TemplatesConfig
    backend: Literal["github", "gitproject", "demo"] = "demo"
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    gitproject: Optional[GitProjectConfig] = None
    output_dir: str = "relatorios"

    @model_validator(mode="after")
    def validate_backend(self) -> "SetupConfig":
        if self.backend == "gitproject" and self.gitproject is None:
            raise ValueError("backend 'gitproject' exige a seção 'gitproject'")
        return self


def load_setup(path: Path) -> SetupConfig:
    """
    Carrega e valida o arquivo de configuração

    Args:
        path: Caminho do arquivo JSON

    Returns:
        SetupConfig: Configuração validada

    Raises:
        ConfigurationError: Arquivo ausente, JSON inválido ou campo obrigatório ausente
    """
    if not path.is_file():
        raise ConfigurationError(f"Arquivo de configuração não encontrado: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Arquivo de configuração {path} não está em UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"JSON inválido em {path}: {e}") from e
    try:
        return SetupConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Configuração inválida em {path}:\n{e}") from e
    except TypeError as e:
        raise ConfigurationError(f"Configuração inválida em {path}: {e}") from e
