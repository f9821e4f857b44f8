from typing import Dict, Any, List
from io import BytesIO
from xml.sax.saxutils import escape
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer
from reportlab.lib.enums import TA_CENTER
from datetime import datetime

from app.core.logging_config import logger


def _fmt_date(value) -> str:
    if not value:
        return "No deadline"
    if isinstance(value, datetime):
        return value.strftime('%Y-%m-%d')
    return str(value)


class DocumentGenerator:
    """Render project documents as PDF (ReportLab platypus)"""

    def generate_project_report_pdf(self, report: Dict[str, Any]) -> bytes:
        """
        Render the project closure report.

        Args:
            report: Plain data built by ReportService - ``project`` info,
                ``stats``, ``members`` and ``tasks`` lists, ``generated_at``

        Returns:
            PDF document bytes (platypus paginates when a page is full)
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            title=f"Project Report - {report['project']['name']}",
            leftMargin=0.8*inch,
            rightMargin=0.8*inch,
            topMargin=0.8*inch,
            bottomMargin=0.8*inch,
        )
        styles = getSampleStyleSheet()

        title_style = ParagraphStyle(
            'ReportTitle',
            parent=styles['Heading1'],
            fontSize=22,
            textColor=colors.darkblue,
            spaceAfter=12,
            alignment=TA_CENTER
        )
        centered = ParagraphStyle('Centered', parent=styles['Normal'], alignment=TA_CENTER)
        body = styles['BodyText']

        story: List[Any] = []
        project = report['project']
        stats = report['stats']

        # Title
        story.append(Paragraph("Project Report", title_style))
        story.append(Paragraph(f"Generated on {_fmt_date(report['generated_at'])}", centered))
        story.append(Spacer(1, 0.3*inch))

        # Project info
        story.append(Paragraph("Project Information", styles['Heading2']))
        for label, value in (
            ("Name", project['name']),
            ("Description", project['description']),
            ("Type", project['type']),
            ("Created by", project['creator']),
            ("Created", _fmt_date(project['created_at'])),
            ("Deadline", _fmt_date(project['deadline'])),
            ("Members", project['member_count']),
        ):
            story.append(Paragraph(f"<b>{label}:</b> {escape(str(value))}", body))
        story.append(Spacer(1, 0.2*inch))

        # Statistics
        story.append(Paragraph("Statistics", styles['Heading2']))
        for label, value in (
            ("Total tasks", stats['total_tasks']),
            ("Completed", stats['completed_tasks']),
            ("In progress", stats['in_progress_tasks']),
            ("Not started", stats['not_started_tasks']),
            ("Completion rate", f"{stats['completion_rate']}%"),
        ):
            story.append(Paragraph(f"<b>{label}:</b> {value}", body))
        story.append(Spacer(1, 0.2*inch))

        # Team
        story.append(Paragraph("Team Members", styles['Heading2']))
        if not report['members']:
            story.append(Paragraph("No members", body))
        for member in report['members']:
            story.append(Paragraph(
                f"{escape(member['name'])} ({escape(member['email'])}): "
                f"{member['tasks']} tasks, {member['completed']} completed",
                body
            ))
        story.append(Spacer(1, 0.2*inch))

        # Tasks
        story.append(Paragraph("Tasks", styles['Heading2']))
        if not report['tasks']:
            story.append(Paragraph("No tasks", body))
        for i, task in enumerate(report['tasks'], 1):
            story.append(Paragraph(
                f"{i}. {escape(task['name'])} - {task['status']} "
                f"(priority: {task['priority']}, deadline: {_fmt_date(task['deadline'])})",
                body
            ))

        doc.build(story)
        pdf_bytes = buffer.getvalue()
        logger.info(f"Generated project report PDF: {project['name']} ({len(pdf_bytes)} bytes)")
        return pdf_bytes


# Create singleton instance
document_generator = DocumentGenerator()
