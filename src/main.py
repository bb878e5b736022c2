import sys
from pathlib import Path
from typing import Optional, Tuple
import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

# Configurando o ambiente
WORKSPACE_ROOT = Path(__file__).parent.parent
if str(WORKSPACE_ROOT) not in sys.path:
    sys.path.append(str(WORKSPACE_ROOT))

# Importando módulos do projeto
from src.models.config import SetupConfig, load_setup
from src.models.entities import Plan
from src.models.errors import SchedulerError
from src.publishers.factory import create_publisher
from src.services.parser import load_schedule
from src.services.pipeline import build_plan
from src.services.report import ReportGenerator, assemble_report

app = typer.Typer(help="Cronograma para Sprints e Kanban - GitHub / GitProject")
console = Console()

DEFAULT_CONFIG = Path("config/projeto-config.json")


def configurar_logger(output_dir: Path = Path("logs")):
    """Configura o sistema de logs"""
    output_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()  # Remove handlers padrão
    logger.add(
        output_dir / "cronograma_{time}.log",
        rotation="1 day",
        retention="7 days",
        level="INFO",
        encoding='utf-8'
    )
    logger.add(lambda msg: console.print(msg, style="blue", end="", markup=False, highlight=False), level="INFO")


def carregar_plano(config_file: Path, base_dir: Optional[Path]) -> Tuple[SetupConfig, Plan]:
    """Carrega a configuração e monta o plano a partir do cronograma"""
    logger.info(f"Carregando configuração: {config_file}")
    setup = load_setup(config_file)
    logger.info(f"Projeto: {setup.project.name}")
    plan = build_plan(setup, base_dir or Path.cwd())
    return setup, plan


def gerar_relatorio(setup: SetupConfig, plan: Plan, output_dir: Optional[Path], project_id: Optional[str] = None, backend: Optional[str] = None) -> None:
    """Consolida e grava o relatório do plano"""
    report = assemble_report(setup.project.name, plan.sprints, plan.boards, project_id=project_id, backend=backend)
    ReportGenerator(report, plan, str(output_dir or setup.output_dir)).generate()
    stats = report.statistics
    logger.info(
        f"{stats.total_tasks} tarefas, {stats.sprints} sprints, {stats.total_cards} cards, {stats.total_points} pontos"
    )


@app.command()
def executar(
    config: Path = typer.Option(DEFAULT_CONFIG, "--config", "-c", help="Arquivo de configuração do projeto"),
    base_dir: Optional[Path] = typer.Option(None, help="Diretório base para localizar o cronograma"),
    output_dir: Optional[Path] = typer.Option(None, help="Diretório dos relatórios (padrão: output_dir da configuração)"),
    log_dir: Path = typer.Option(Path("logs"), help="Diretório dos logs"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Não envia nada ao backend (modo demonstração)"),
):
    """Executa o processo completo: cronograma, sprints, Kanban, publicação e relatório"""
    configurar_logger(log_dir)
    try:
        logger.info("Iniciando execução")
        setup, plan = carregar_plano(config, base_dir)

        publisher = create_publisher(setup, dry_run=dry_run)
        logger.info(f"Publicando plano ({publisher.name})...")
        try:
            result = publisher.publish(plan, setup)
        finally:
            publisher.close()

        gerar_relatorio(setup, plan, output_dir, project_id=result.project_id, backend=result.backend)
        logger.info("Processo concluído com sucesso!")

    except SchedulerError as e:
        logger.error(f"Erro durante execução: {e}")
        raise typer.Exit(1)


@app.command()
def planejar(
    config: Path = typer.Option(DEFAULT_CONFIG, "--config", "-c", help="Arquivo de configuração do projeto"),
    base_dir: Optional[Path] = typer.Option(None, help="Diretório base para localizar o cronograma"),
    output_dir: Optional[Path] = typer.Option(None, help="Diretório dos relatórios (padrão: output_dir da configuração)"),
    log_dir: Path = typer.Option(Path("logs"), help="Diretório dos logs"),
):
    """Gera o plano de sprints e os relatórios, sem publicar"""
    configurar_logger(log_dir)
    try:
        setup, plan = carregar_plano(config, base_dir)
        gerar_relatorio(setup, plan, output_dir)
    except SchedulerError as e:
        logger.error(f"Erro durante planejamento: {e}")
        raise typer.Exit(1)


@app.command()
def validar(
    config: Path = typer.Option(DEFAULT_CONFIG, "--config", "-c", help="Arquivo de configuração do projeto"),
    base_dir: Optional[Path] = typer.Option(None, help="Diretório base para localizar o cronograma"),
):
    """Valida a configuração e o cronograma"""
    try:
        setup = load_setup(config)
        tasks = load_schedule(setup, base_dir or Path.cwd())
    except SchedulerError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Configuração válida: {escape(setup.project.name)} ({len(tasks)} tarefas no cronograma)[/green]")


if __name__ == "__main__":
    app()
