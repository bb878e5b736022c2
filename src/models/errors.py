from pathlib import Path
from typing import List, Sequence


class SchedulerError(Exception):
    """Erro base do planejador de sprints"""


class ConfigurationError(SchedulerError):
    """Arquivo ou campo de configuração ausente ou inválido"""


class ScheduleNotFoundError(SchedulerError):
    """Cronograma não encontrado em nenhum dos caminhos candidatos"""

    def __init__(self, candidates: Sequence[Path]):
        self.candidates: List[Path] = list(candidates)
        paths = ", ".join(str(c) for c in self.candidates) or "-"
        super().__init__(f"Arquivo de cronograma não encontrado. Caminhos verificados: {paths}")


class ScheduleReadError(SchedulerError):
    """Cronograma encontrado, mas ilegível"""


class PublishError(SchedulerError):
    """Falha ao publicar o plano no backend"""
