from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import httpx
from loguru import logger
from pydantic import BaseModel, Field

from ..models.config import SetupConfig
from ..models.entities import Plan
from ..models.errors import PublishError


class PublishResult(BaseModel):
    """Resultado da publicação do plano em um backend"""

    backend: str
    project_id: Optional[str] = None
    sprints: List[str] = Field(default_factory=list)
    issues: List[str] = Field(default_factory=list)
    boards: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    simulated: bool = False


class Publisher(ABC):
    """Publica um plano já montado em um backend de acompanhamento"""

    name: str = "base"

    @abstractmethod
    def publish(self, plan: Plan, setup: SetupConfig) -> PublishResult:
        """
        Publica sprints e quadros do plano

        Args:
            plan: Plano com sprints e quadros
            setup: Configuração do projeto

        Returns:
            PublishResult: O que foi criado no backend

        Raises:
            PublishError: Falha de comunicação com o backend
        """

    def close(self) -> None:
        """Libera recursos do publicador"""


class HttpPublisher(Publisher):
    """Base para publicadores que falam com uma API REST via httpx"""

    def __init__(self, base_url: str, headers: Dict[str, str], transport: Optional[httpx.BaseTransport] = None, timeout: float = 30.0):
        self.client = httpx.Client(base_url=base_url, headers=headers, transport=transport, timeout=timeout)

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Executa a requisição e converte falhas em PublishError"""
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {url} retornou {e.response.status_code}: {e.response.text}")
            raise PublishError(f"{self.name}: {method} {url} falhou com status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} falhou: {e}")
            raise PublishError(f"{self.name}: {method} {url} falhou: {e}") from e

    def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", url, json=payload).json()

    def close(self) -> None:
        self.client.close()
