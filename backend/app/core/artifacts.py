# backend/app/core/artifacts.py

from typing import Dict, Any, List, Optional
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_CENTER
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, ListFlowable
from reportlab.lib import colors
import datetime

SECTIONS = (
    ("contentQuality", "Content Quality"),
    ("formatting", "Formatting"),
    ("industryRelevance", "Industry Relevance"),
    ("impactStatements", "Impact Statements"),
)

REPORT_TITLE = "Resume Analysis Report"


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def _context_line(meta: Dict[str, Optional[str]]) -> str:
    bits = [f"{label}: {meta[key]}" for key, label in
            (("job_role", "Role"), ("industry", "Industry"), ("experience_level", "Level")) if meta.get(key)]
    return " · ".join(bits)


class MarkdownReport:
    """Markdown rendering of a completed resume analysis."""

    def render(self, result: Dict[str, Any], meta: Optional[Dict[str, Optional[str]]] = None) -> str:
        meta = meta or {}
        md = f"# {REPORT_TITLE}\n\n_Generated: {_now()}_\n\n"
        context = _context_line(meta)
        if context:
            md += f"{context}\n\n"
        md += f"## Overall Score\n**{result.get('overallScore', 'N/A')}/100**\n\n"
        md += f"## Summary\n{result.get('summary') or '_No summary provided._'}\n\n"
        md += self._list("Strengths", result.get("strengths"))
        md += self._list("Areas for Improvement", result.get("areasForImprovement"))

        for key, label in SECTIONS:
            section = result.get(key) or {}
            md += f"## {label} ({section.get('score', 'N/A')}/100)\n"
            md += f"{section.get('feedback') or '_No feedback._'}\n\n"
            suggestions = section.get("suggestions") or []
            if suggestions:
                md += "\n".join(f"- {s}" for s in suggestions) + "\n\n"

        edits = result.get("suggestedEdits") or []
        if edits:
            md += "## Suggested Edits\n"
            for i, edit in enumerate(edits, start=1):
                md += f"{i}. **Original:** {edit.get('original', '')}\n"
                md += f"   **Improved:** {edit.get('improved', '')}\n"
                if edit.get("explanation"):
                    md += f"   _{edit['explanation']}_\n"
            md += "\n"
        return md

    @staticmethod
    def _list(title: str, items: Optional[List[str]]) -> str:
        items = items or []
        body = "\n".join(f"- {s}" for s in items) + "\n\n" if items else "_None_\n\n"
        return f"## {title}\n{body}"


class PDFRenderer:
    """Render a completed resume analysis as a PDF using ReportLab."""

    def __init__(self):
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            name="TitleCentered",
            parent=styles["Title"],
            alignment=TA_CENTER,
            spaceAfter=12,
        )
        self.h2 = styles["Heading2"]
        self.h3 = styles["Heading3"]
        self.body = styles["BodyText"]

    # ---------- Public API ----------
    def build_analysis_pdf(self, path: str, result: Dict[str, Any], meta: Optional[Dict[str, Optional[str]]] = None) -> None:
        """Structured, sectioned report for a resume analysis."""
        doc = SimpleDocTemplate(
            path, pagesize=A4,
            topMargin=2 * cm, bottomMargin=2 * cm,
            leftMargin=2 * cm, rightMargin=2 * cm
        )
        flow: List = []
        flow += self._header(REPORT_TITLE, _context_line(meta or {}))

        flow.append(Paragraph("Overall Score", self.h2))
        flow.append(Paragraph(f"<b>{self._escape_html(str(result.get('overallScore', 'N/A')))}/100</b>", self.body))
        flow.append(Spacer(1, 0.3 * cm))

        flow.append(Paragraph("Summary", self.h2))
        flow.append(Paragraph(self._nl2br(self._escape_html(result.get("summary") or "No summary provided.")), self.body))
        flow.append(Spacer(1, 0.3 * cm))

        flow.append(Paragraph("Strengths", self.h2))
        flow += self._bullet_list(result.get("strengths") or [])
        flow.append(Paragraph("Areas for Improvement", self.h2))
        flow += self._bullet_list(result.get("areasForImprovement") or [])

        for key, label in SECTIONS:
            section = result.get(key) or {}
            flow.append(Paragraph(f"{label} ({self._escape_html(str(section.get('score', 'N/A')))}/100)", self.h3))
            flow.append(Paragraph(self._escape_html(section.get("feedback") or "No feedback."), self.body))
            suggestions = section.get("suggestions") or []
            if suggestions:
                flow += self._bullet_list(suggestions)
            flow.append(Spacer(1, 0.2 * cm))

        edits = result.get("suggestedEdits") or []
        if edits:
            flow.append(Paragraph("Suggested Edits", self.h2))
            items = [
                f"<b>Original:</b> {self._escape_html(e.get('original', ''))}<br/>"
                f"<b>Improved:</b> {self._escape_html(e.get('improved', ''))}"
                + (f"<br/><i>{self._escape_html(e['explanation'])}</i>" if e.get("explanation") else "")
                for e in edits
            ]
            flow += self._numbered_list(items)

        doc.build(flow)

    # ---------- Section Builders ----------
    def _header(self, title: str, subtitle: str = "") -> List:
        flow = [
            Paragraph(title, self.title_style),
            Paragraph(f"<font size=9 color=grey>Generated: {self._escape_html(_now())}</font>", self.body),
        ]
        if subtitle:
            flow.append(Paragraph(self._escape_html(subtitle), self.body))
        flow.append(Spacer(1, 0.5 * cm))
        return flow

    def _bullet_list(self, items: List[str]) -> List:
        """Unordered bullet list with clean bullets."""
        if not items:
            return [Paragraph("<i>None</i>", self.body)]
        paras = [Paragraph(self._escape_html(x), self.body) for x in items]
        return [ListFlowable(
            paras,
            bulletType="bullet",
            leftIndent=10,
            bulletColor=colors.black,
        )]

    def _numbered_list(self, items: List[str]) -> List:
        """Ordered list of pre-escaped paragraphs."""
        paras = [Paragraph(x, self.body) for x in items]
        return [ListFlowable(
            paras,
            bulletType="1",
            leftIndent=10,
            bulletColor=colors.black,
        )]

    # ---------- Inline helpers ----------
    @staticmethod
    def _nl2br(text: str) -> str:
        """Convert newlines to <br/> for ReportLab Paragraph."""
        return text.replace("\n", "<br/>")

    @staticmethod
    def _escape_html(text: str) -> str:
        """Minimal XML/HTML escaping for ReportLab Paragraph."""
        return (
            str(text).replace("&", "&amp;")
                .replace("<", "&lt;")
                .replace(">", "&gt;")
        )
