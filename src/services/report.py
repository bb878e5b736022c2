from datetime import datetime
from typing import Dict, List, Optional
from pathlib import Path
import re
from xml.sax.saxutils import escape
from loguru import logger
import markdown
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, TableStyle, LongTable
from reportlab.lib.enums import TA_LEFT, TA_CENTER
from reportlab.platypus.flowables import KeepTogether
import openpyxl
from openpyxl.styles import PatternFill, Border, Side, Alignment, Font
from openpyxl.utils import get_column_letter

from ..models.entities import KanbanBoard, Plan, PlanReport, ReportStatistics, Sprint, SprintSummary

HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def assemble_report(
    project_name: str,
    sprints: List[Sprint],
    boards: List[KanbanBoard],
    project_id: Optional[str] = None,
    backend: Optional[str] = None,
) -> PlanReport:
    """
    Consolida sprints e quadros no relatório final

    Args:
        project_name: Nome do projeto
        sprints: Sprints alocadas
        boards: Quadros Kanban das sprints
        project_id: Identificador do projeto no backend, quando publicado
        backend: Nome do backend usado na publicação

    Returns:
        PlanReport: Totais e resumo por sprint
    """
    statistics = ReportStatistics(
        total_tasks=sum(len(s.tasks) for s in sprints),
        sprints=len(sprints),
        kanban_boards=len(boards),
        total_cards=sum(len(b.all_cards()) for b in boards),
        total_points=sum(s.total_points for s in sprints),
    )
    summaries = [
        SprintSummary(
            number=s.number,
            name=s.name,
            goal=s.goal,
            points=s.total_points,
            tasks=len(s.tasks),
            start_date=s.start_date,
            end_date=s.end_date,
            period=s.period,
        )
        for s in sprints
    ]
    return PlanReport(
        generated_at=datetime.now(),
        project_name=project_name,
        project_id=project_id,
        backend=backend,
        statistics=statistics,
        sprints=summaries,
    )


def _excel_fill(color: str) -> Optional[PatternFill]:
    """Converte uma cor "#RRGGBB" em preenchimento do Excel (outras notações são ignoradas)"""
    match = HEX_COLOR_RE.match(color.strip())
    if not match:
        return None
    hex_color = match.group(1).upper()
    return PatternFill(start_color=hex_color, end_color=hex_color, fill_type='solid')


class ReportGenerator:
    """Serviço responsável pela gravação dos relatórios do plano"""

    def __init__(self, report: PlanReport, plan: Plan, output_dir: str):
        """
        Inicializa o gerador de relatórios

        Args:
            report: Relatório consolidado
            plan: Plano com sprints e quadros
            output_dir: Diretório de saída dos relatórios
        """
        self.report = report
        self.plan = plan
        self.output_dir = Path(output_dir)
        self.base_name = f"relatorio-{report.generated_at.strftime('%Y%m%d-%H%M%S')}"

        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.styles = getSampleStyleSheet()
        self._setup_styles()

    def _setup_styles(self):
        """Configura estilos personalizados para o relatório"""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Title'],
            fontSize=16,
            spaceAfter=30,
            textColor=colors.HexColor('#FF6B00'),
            alignment=TA_CENTER
        ))

        self.styles.add(ParagraphStyle(
            name='CustomHeading1',
            parent=self.styles['Heading1'],
            fontSize=14,
            spaceAfter=12,
            textColor=colors.HexColor('#FF6B00'),
            alignment=TA_LEFT
        ))

        self.styles.add(ParagraphStyle(
            name='NormalWrap',
            parent=self.styles['Normal'],
            fontSize=10,
            leading=12,
            spaceAfter=6,
            alignment=TA_LEFT
        ))

        self.styles.add(ParagraphStyle(
            name='TableCell',
            parent=self.styles['Normal'],
            fontSize=9,
            leading=11,
            alignment=TA_LEFT
        ))

        self.styles.add(ParagraphStyle(
            name='TableHeader',
            parent=self.styles['Normal'],
            fontSize=10,
            leading=12,
            alignment=TA_LEFT,
            fontName='Helvetica-Bold',
            textColor=colors.white
        ))

    def _create_table_style(self, header_bg_color=colors.HexColor('#FF6B00')):
        """Cria um estilo padrão para as tabelas"""
        return TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), header_bg_color),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 1, colors.black),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 0), (-1, -1), 6),
            ('RIGHTPADDING', (0, 0), (-1, -1), 6),
            ('TOPPADDING', (0, 0), (-1, -1), 6),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#FFF5EB')]),
        ])

    def _path(self, suffix: str) -> Path:
        return self.output_dir / f"{self.base_name}.{suffix}"

    def _generate_markdown(self) -> str:
        """Gera o conteúdo do relatório em Markdown"""
        stats = self.report.statistics
        report = []

        report.append(f"# Plano de Sprints - {self.report.project_name}")
        report.append("")
        report.append(f"Gerado em {self.report.generated_at.strftime('%d/%m/%Y %H:%M')}")
        report.append("")

        # 1. Resumo
        report.append("## 1. Resumo")
        report.append("")
        report.append("| Métrica | Valor |")
        report.append("|---------|-------|")
        report.append(f"| Tarefas | {stats.total_tasks} |")
        report.append(f"| Sprints | {stats.sprints} |")
        report.append(f"| Quadros Kanban | {stats.kanban_boards} |")
        report.append(f"| Cards | {stats.total_cards} |")
        report.append(f"| Story Points | {stats.total_points} |")
        if self.report.backend:
            report.append(f"| Backend | {self.report.backend} |")
        if self.report.project_id:
            report.append(f"| Projeto | {self.report.project_id} |")
        report.append("")

        # 2. Sprints
        report.append("## 2. Sprints")
        report.append("")
        report.append("| Sprint | Período | Pontos | Tarefas | Objetivo |")
        report.append("|--------|---------|--------|---------|----------|")
        for s in self.report.sprints:
            report.append(f"| {s.name} | {s.period} | {s.points} | {s.tasks} | {s.goal} |")
        report.append("")

        # 3. Tarefas por sprint
        report.append("## 3. Tarefas por Sprint")
        report.append("")
        for sprint in self.plan.sprints:
            report.append(f"### {sprint.name}")
            report.append("")
            report.append("| ID | Atividade | Duração | Prioridade | Pontos | Entregável |")
            report.append("|----|-----------|---------|------------|--------|------------|")
            for task in sprint.tasks:
                report.append(
                    f"| {task.id} | {task.title} | {task.duration_hours}h | {task.priority.label} | {task.points} | {task.deliverable} |"
                )
            report.append("")

        return "\n".join(report)

    def generate(self) -> Dict[str, Path]:
        """Gera o relatório em JSON, Markdown, HTML, PDF e Excel"""
        files = {}

        json_path = self._path("json")
        json_path.write_text(self.report.model_dump_json(indent=2), encoding='utf-8')
        logger.info(f"Relatório JSON salvo em {json_path}")
        files["json"] = json_path

        markdown_content = self._generate_markdown()
        markdown_path = self._path("md")
        markdown_path.write_text(markdown_content, encoding='utf-8')
        logger.info(f"Relatório Markdown gerado em {markdown_path}")
        files["md"] = markdown_path

        html_path = self._path("html")
        html_body = markdown.markdown(markdown_content, extensions=["tables"])
        html_path.write_text(
            f"<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\"><title>{escape(self.report.project_name)}</title></head>"
            f"<body>\n{html_body}\n</body></html>\n",
            encoding='utf-8'
        )
        logger.info(f"Relatório HTML gerado em {html_path}")
        files["html"] = html_path

        files["pdf"] = self._generate_pdf()
        files["xlsx"] = self._generate_excel()
        return files

    def _generate_pdf(self) -> Path:
        """Gera o relatório em PDF"""
        pdf_path = self._path("pdf")
        doc = SimpleDocTemplate(
            str(pdf_path),
            pagesize=A4,
            rightMargin=2*cm,
            leftMargin=2*cm,
            topMargin=2*cm,
            bottomMargin=2*cm
        )
        available_width = doc.width
        stats = self.report.statistics

        elements = []
        elements.append(Paragraph(f"Plano de Sprints: {escape(self.report.project_name)}", self.styles['CustomTitle']))
        elements.append(Spacer(1, 12))

        # 1. Resumo
        elements.append(Paragraph("1. Resumo", self.styles['CustomHeading1']))
        elements.append(Paragraph(f"Tarefas: {stats.total_tasks}", self.styles['NormalWrap']))
        elements.append(Paragraph(f"Sprints: {stats.sprints}", self.styles['NormalWrap']))
        elements.append(Paragraph(f"Cards: {stats.total_cards}", self.styles['NormalWrap']))
        elements.append(Paragraph(f"Story Points: {stats.total_points}", self.styles['NormalWrap']))
        elements.append(Spacer(1, 12))

        # 2. Sprints
        elements.append(Paragraph("2. Sprints", self.styles['CustomHeading1']))
        sprint_data = [[
            Paragraph('Sprint', self.styles['TableHeader']),
            Paragraph('Período', self.styles['TableHeader']),
            Paragraph('Pontos', self.styles['TableHeader']),
            Paragraph('Tarefas', self.styles['TableHeader']),
            Paragraph('Objetivo', self.styles['TableHeader'])
        ]]
        for s in self.report.sprints:
            sprint_data.append([
                Paragraph(escape(s.name), self.styles['TableCell']),
                Paragraph(f"{s.start_date.strftime('%d/%m/%Y')} a {s.end_date.strftime('%d/%m/%Y')}", self.styles['TableCell']),
                str(s.points),
                str(s.tasks),
                Paragraph(escape(s.goal), self.styles['TableCell'])
            ])
        sprint_table = LongTable(
            sprint_data,
            colWidths=[
                available_width * 0.15,
                available_width * 0.25,
                available_width * 0.1,
                available_width * 0.1,
                available_width * 0.4
            ]
        )
        sprint_table.setStyle(self._create_table_style())
        elements.append(KeepTogether(sprint_table))
        elements.append(Spacer(1, 12))

        # 3. Tarefas por sprint
        elements.append(Paragraph("3. Tarefas por Sprint", self.styles['CustomHeading1']))
        for sprint in self.plan.sprints:
            elements.append(Paragraph(escape(sprint.name), self.styles['NormalWrap']))
            task_data = [[
                Paragraph('ID', self.styles['TableHeader']),
                Paragraph('Atividade', self.styles['TableHeader']),
                Paragraph('Prioridade', self.styles['TableHeader']),
                Paragraph('Pontos', self.styles['TableHeader']),
                Paragraph('Entregável', self.styles['TableHeader'])
            ]]
            for task in sprint.tasks:
                task_data.append([
                    task.id,
                    Paragraph(escape(task.title), self.styles['TableCell']),
                    task.priority.label,
                    str(task.points),
                    Paragraph(escape(task.deliverable), self.styles['TableCell'])
                ])
            task_table = LongTable(
                task_data,
                colWidths=[
                    available_width * 0.1,
                    available_width * 0.4,
                    available_width * 0.15,
                    available_width * 0.1,
                    available_width * 0.25
                ]
            )
            task_table.setStyle(self._create_table_style())
            elements.append(task_table)
            elements.append(Spacer(1, 12))

        doc.build(elements)
        logger.info(f"Relatório PDF gerado em {pdf_path}")
        return pdf_path

    def _generate_excel(self) -> Path:
        """Gera o relatório em Excel: uma aba de resumo e uma aba por quadro Kanban"""
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Sprints"

        thin = Side(style='thin')
        border = Border(left=thin, right=thin, top=thin, bottom=thin)
        header_fill = PatternFill(start_color='FF6B00', end_color='FF6B00', fill_type='solid')

        headers = ["Sprint", "Início", "Fim", "Pontos", "Tarefas", "Objetivo"]
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = Font(bold=True, color='FFFFFF')
            cell.fill = header_fill
            cell.border = border
            cell.alignment = Alignment(horizontal='center')

        for row, s in enumerate(self.report.sprints, start=2):
            values = [s.name, s.start_date, s.end_date, s.points, s.tasks, s.goal]
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = border
                if col in (2, 3):
                    cell.number_format = 'dd/mm/yyyy'

        for col, width in enumerate([18, 14, 14, 10, 10, 60], start=1):
            ws.column_dimensions[get_column_letter(col)].width = width

        for board in self.plan.boards:
            self._add_board_sheet(wb, board, border)

        excel_path = self._path("xlsx")
        wb.save(str(excel_path))
        logger.info(f"Relatório Excel gerado em {excel_path}")
        return excel_path

    def _add_board_sheet(self, wb, board: KanbanBoard, border: Border) -> None:
        """Aba com as colunas do quadro lado a lado e um card por linha"""
        ws = wb.create_sheet(title=board.id)

        for col, column in enumerate(board.columns, start=1):
            title = column.name if column.wip_limit is None else f"{column.name} (WIP {column.wip_limit})"
            cell = ws.cell(row=1, column=col, value=title)
            cell.font = Font(bold=True)
            cell.border = border
            cell.alignment = Alignment(horizontal='center')
            fill = _excel_fill(column.color)
            if fill is not None:
                cell.fill = fill
            ws.column_dimensions[get_column_letter(col)].width = 40

            for row, card in enumerate(column.cards, start=2):
                cell = ws.cell(row=row, column=col, value=f"[{card.points}] {card.title}")
                cell.border = border
                cell.alignment = Alignment(wrap_text=True, vertical='top')
