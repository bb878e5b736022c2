from pathlib import Path
from typing import List
from loguru import logger

from ..models.config import SetupConfig
from ..models.entities import Plan, Task
from .allocator import SprintAllocator
from .kanban import KanbanBoardBuilder
from .parser import load_schedule


def build_plan_from_tasks(tasks: List[Task], setup: SetupConfig) -> Plan:
    """
    Aloca as tarefas em sprints e cria os quadros Kanban

    Args:
        tasks: Tarefas extraídas do cronograma
        setup: Configuração do projeto

    Returns:
        Plan: Tarefas, sprints e quadros desta execução
    """
    sprints = SprintAllocator(setup.sprints, setup.templates.sprint_goal).allocate(tasks)
    boards = KanbanBoardBuilder(setup.kanban, setup.templates).build_all(sprints)
    return Plan(tasks=tasks, sprints=sprints, boards=boards)


def build_plan(setup: SetupConfig, base_dir: Path) -> Plan:
    """Executa o pipeline completo: cronograma -> tarefas -> sprints -> quadros"""
    logger.info("Lendo cronograma...")
    tasks = load_schedule(setup, base_dir)
    logger.info("Organizando sprints...")
    return build_plan_from_tasks(tasks, setup)
