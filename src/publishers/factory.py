from loguru import logger

from ..models.config import SetupConfig
from .base import Publisher
from .demo import DemoPublisher
from .github import GitHubPublisher
from .gitproject import GitProjectPublisher


def create_publisher(setup: SetupConfig, dry_run: bool = False) -> Publisher:
    """
    Escolhe o publicador do backend configurado

    Sem credenciais (ou com dry_run) usa o modo demonstração.
    """
    if dry_run or setup.backend == "demo":
        return DemoPublisher()

    if setup.backend == "github":
        config = setup.github.resolve_credentials()
        missing = config.missing_credentials()
        if missing:
            logger.warning(f"Variáveis de ambiente faltando: {', '.join(missing)}. Continuando em modo demonstração")
            return DemoPublisher()
        return GitHubPublisher(config)

    config = setup.gitproject.resolve_credentials()
    missing = config.missing_credentials()
    if missing:
        logger.warning(f"Variáveis de ambiente faltando: {', '.join(missing)}. Continuando em modo demonstração")
        return DemoPublisher()
    return GitProjectPublisher(config)
