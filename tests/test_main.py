import json
import pytest
from unittest.mock import Mock, patch
from typer.testing import CliRunner
from src.main import app
from src.models.errors import PublishError
from src.publishers.base import PublishResult

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path, setup_data, schedule_text):
    """Fixture com configuração e cronograma gravados em disco"""
    config_file = tmp_path / "config" / "projeto-config.json"
    config_file.parent.mkdir()
    config_file.write_text(json.dumps(setup_data), encoding="utf-8")
    (tmp_path / "CRONOGRAMA.md").write_text(schedule_text, encoding="utf-8")
    return tmp_path, config_file


def common_args(tmp_path, config_file):
    return [
        "--config", str(config_file),
        "--base-dir", str(tmp_path),
        "--output-dir", str(tmp_path / "relatorios"),
        "--log-dir", str(tmp_path / "logs"),
    ]


def test_executar_dry_run(workspace):
    """Testa o fluxo completo em modo demonstração"""
    tmp_path, config_file = workspace
    result = runner.invoke(app, ["executar", *common_args(tmp_path, config_file), "--dry-run"])

    assert result.exit_code == 0, result.output
    reports = list((tmp_path / "relatorios").glob("relatorio-*.json"))
    assert len(reports) == 1
    data = json.loads(reports[0].read_text(encoding="utf-8"))
    assert data["backend"] == "demo"
    assert data["statistics"]["sprints"] == 2


def test_executar_uses_publisher(workspace):
    """Testa a publicação com o publicador escolhido pela fábrica"""
    tmp_path, config_file = workspace
    publisher = Mock()
    publisher.name = "github"
    publisher.publish.return_value = PublishResult(backend="github", project_id="empresa/projeto")

    with patch("src.main.create_publisher", return_value=publisher):
        result = runner.invoke(app, ["executar", *common_args(tmp_path, config_file)])

    assert result.exit_code == 0, result.output
    publisher.publish.assert_called_once()
    plan = publisher.publish.call_args.args[0]
    assert [s.name for s in plan.sprints] == ["Sprint 1", "Sprint 2"]
    publisher.close.assert_called_once()
    report = next((tmp_path / "relatorios").glob("relatorio-*.json"))
    assert json.loads(report.read_text(encoding="utf-8"))["project_id"] == "empresa/projeto"


def test_executar_publish_error(workspace):
    """Testa falha na publicação"""
    tmp_path, config_file = workspace
    publisher = Mock()
    publisher.name = "github"
    publisher.publish.side_effect = PublishError("github indisponível")

    with patch("src.main.create_publisher", return_value=publisher):
        result = runner.invoke(app, ["executar", *common_args(tmp_path, config_file)])

    assert result.exit_code == 1
    publisher.close.assert_called_once()
    assert not (tmp_path / "relatorios").exists()


def test_executar_missing_config(tmp_path):
    """Testa configuração inexistente"""
    result = runner.invoke(app, ["executar", *common_args(tmp_path, tmp_path / "nao-existe.json")])
    assert result.exit_code == 1


def test_executar_missing_schedule(workspace):
    """Testa cronograma inexistente: nada é alocado nem gravado"""
    tmp_path, config_file = workspace
    (tmp_path / "CRONOGRAMA.md").unlink()

    result = runner.invoke(app, ["executar", *common_args(tmp_path, config_file), "--dry-run"])
    assert result.exit_code == 1
    assert not (tmp_path / "relatorios").exists()


def test_planejar(workspace):
    """Testa a geração do plano sem publicação"""
    tmp_path, config_file = workspace
    with patch("src.main.create_publisher") as factory:
        result = runner.invoke(app, ["planejar", *common_args(tmp_path, config_file)])

    assert result.exit_code == 0, result.output
    factory.assert_not_called()
    assert len(list((tmp_path / "relatorios").glob("relatorio-*.xlsx"))) == 1


def test_planejar_empty_schedule(workspace):
    """Testa cronograma sem tarefas: plano vazio, sem erro"""
    tmp_path, config_file = workspace
    (tmp_path / "CRONOGRAMA.md").write_text("# Cronograma vazio\n", encoding="utf-8")

    result = runner.invoke(app, ["planejar", *common_args(tmp_path, config_file)])
    assert result.exit_code == 0, result.output
    report = next((tmp_path / "relatorios").glob("relatorio-*.json"))
    assert json.loads(report.read_text(encoding="utf-8"))["statistics"]["sprints"] == 0


def test_validar(workspace):
    """Testa a validação da configuração"""
    tmp_path, config_file = workspace
    result = runner.invoke(app, ["validar", "--config", str(config_file), "--base-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "3 tarefas" in result.output


def test_validar_invalid_config(workspace, setup_data):
    """Testa configuração sem coluna de backlog"""
    tmp_path, config_file = workspace
    for column in setup_data["kanban"]["columns"]:
        column["is_backlog"] = False
    config_file.write_text(json.dumps(setup_data), encoding="utf-8")

    result = runner.invoke(app, ["validar", "--config", str(config_file), "--base-dir", str(tmp_path)])
    assert result.exit_code == 1
