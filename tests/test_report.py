import json
import pytest
from datetime import date
import openpyxl
from src.services.pipeline import build_plan_from_tasks
from src.services.parser import parse_schedule
from src.services.report import ReportGenerator, assemble_report


@pytest.fixture
def plan(schedule_text, setup_config):
    """Fixture com o plano do cronograma de exemplo"""
    tasks = parse_schedule(schedule_text, setup_config.scoring)
    return build_plan_from_tasks(tasks, setup_config)


@pytest.fixture
def report(plan):
    """Fixture com o relatório consolidado"""
    return assemble_report("Projeto Teste", plan.sprints, plan.boards, project_id="42", backend="demo")


def test_assemble_report_statistics(report):
    """Testa os totais do relatório"""
    stats = report.statistics
    assert stats.total_tasks == 3
    assert stats.sprints == 2
    assert stats.kanban_boards == 2
    assert stats.total_cards == 3
    assert stats.total_points == 6
    assert report.project_id == "42"
    assert report.backend == "demo"


def test_assemble_report_sprint_summaries(report):
    """Testa o resumo por sprint"""
    first, second = report.sprints
    assert first.name == "Sprint 1"
    assert first.points == 5
    assert first.tasks == 2
    assert first.start_date == date(2025, 8, 18)
    assert first.period == "2025-08-18 a 2025-08-31"
    assert second.period == "2025-09-01 a 2025-09-14"


def test_assemble_report_empty():
    """Testa relatório de um plano vazio"""
    report = assemble_report("Projeto Vazio", [], [])
    assert report.statistics.total_tasks == 0
    assert report.statistics.sprints == 0
    assert report.sprints == []


def test_generate_writes_all_formats(report, plan, tmp_path):
    """Testa a gravação dos relatórios"""
    files = ReportGenerator(report, plan, str(tmp_path / "relatorios")).generate()

    assert set(files) == {"json", "md", "html", "pdf", "xlsx"}
    for path in files.values():
        assert path.exists()
        assert path.stat().st_size > 0


def test_json_report_content(report, plan, tmp_path):
    """Testa o conteúdo do relatório JSON"""
    files = ReportGenerator(report, plan, str(tmp_path)).generate()
    data = json.loads(files["json"].read_text(encoding="utf-8"))

    assert data["project_name"] == "Projeto Teste"
    assert data["statistics"]["total_points"] == 6
    assert [s["name"] for s in data["sprints"]] == ["Sprint 1", "Sprint 2"]


def test_markdown_report_content(report, plan, tmp_path):
    """Testa o conteúdo do relatório Markdown e HTML"""
    files = ReportGenerator(report, plan, str(tmp_path)).generate()
    content = files["md"].read_text(encoding="utf-8")

    assert "# Plano de Sprints - Projeto Teste" in content
    assert "| Sprint 1 | 2025-08-18 a 2025-08-31 | 5 | 2 |" in content
    assert "| T003 | Revisar documentação | 2h | Baixa | 1 | Docs atualizadas |" in content
    assert "<table>" in files["html"].read_text(encoding="utf-8")


def test_excel_report_content(report, plan, tmp_path):
    """Testa as abas do relatório Excel"""
    files = ReportGenerator(report, plan, str(tmp_path)).generate()
    wb = openpyxl.load_workbook(files["xlsx"])

    assert wb.sheetnames == ["Sprints", "KB_01", "KB_02"]
    assert wb["Sprints"]["A2"].value == "Sprint 1"
    board = wb["KB_01"]
    assert board["A1"].value == "📋 Backlog"
    assert board["B1"].value == "Em Progresso (WIP 3)"
    assert board["A2"].value == "[3] Setup ambiente de desenvolvimento"


def test_generate_with_markup_characters(setup_config, tmp_path):
    """Testa tarefas com caracteres de marcação (<, >, &) no título e no entregável"""
    text = (
        "| Dia | Atividade | Duração | Entregável | Prioridade |\n"
        "|-----|-----------|---------|------------|------------|\n"
        "| 1 | Revisar <b>layout | 4h | Entrega & docs | Alta |\n"
    )
    tasks = parse_schedule(text, setup_config.scoring)
    plan = build_plan_from_tasks(tasks, setup_config)
    report = assemble_report("Projeto <Teste> & Cia", plan.sprints, plan.boards)

    files = ReportGenerator(report, plan, str(tmp_path)).generate()

    assert files["pdf"].stat().st_size > 0
    assert "<title>Projeto &lt;Teste&gt; &amp; Cia</title>" in files["html"].read_text(encoding="utf-8")
    assert "| T001 | Revisar <b>layout | 4h | Alta |" in files["md"].read_text(encoding="utf-8")
