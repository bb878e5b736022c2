import pytest
from src.models.config import SetupConfig


@pytest.fixture
def setup_data():
    """Fixture com a configuração mínima do projeto"""
    return {
        "project": {"name": "Projeto Teste", "description": "Projeto de teste"},
        "schedule": {"file": "CRONOGRAMA.md", "fallback_files": ["docs/CRONOGRAMA.md"]},
        "sprints": {
            "capacity_points": 5,
            "duration_days": 14,
            "project_start": "2025-08-18",
            "prefix": "Sprint",
        },
        "scoring": {
            "hours_per_point": 4,
            "scale": [1, 2, 3, 5, 8],
            "priority_adjustment": {"alta": 1, "media": 0, "baixa": -1},
        },
        "kanban": {
            "columns": [
                {"name": "📋 Backlog", "color": "#6c757d", "is_backlog": True},
                {"name": "Em Progresso", "color": "#ffc107", "wip_limit": 3},
                {"name": "Concluído", "color": "#198754"},
            ]
        },
        "templates": {
            "sprint_goal": "Entregar {main_features}",
            "card_description": "Entregável: {deliverable} | Sprint: {sprint} | Pontos: {points}",
            "checklist": ["Implementado", "Testado"],
        },
        "backend": "demo",
    }


@pytest.fixture
def setup_config(setup_data):
    """Fixture para a configuração validada"""
    return SetupConfig(**setup_data)


@pytest.fixture
def schedule_text():
    """Fixture com o cronograma de exemplo"""
    return (
        "# Cronograma\n"
        "\n"
        "| Dia | Atividade | Duração | Entregável | Prioridade |\n"
        "|-----|-----------|---------|------------|------------|\n"
        "| 1 | Setup ambiente de desenvolvimento | 8h | Ambiente configurado | Alta |\n"
        "| 2 | Escrever testes unitários | 8h | Suite de testes | Média |\n"
        "| 3 | Revisar documentação | 2h | Docs atualizadas | Baixa |\n"
    )
