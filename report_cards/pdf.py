from __future__ import annotations  # Styled PDF rendering for student report cards

from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from .models import ReportCard

DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (79, 70, 229)  # Header and recommendations
HEADING = (31, 41, 55)  # Section titles
TEXT = (55, 65, 81)  # Body text
MUTED = (156, 163, 175)  # Footer text
RULE = (229, 231, 235)  # Divider color
POSITIVE = (5, 150, 105)  # Strengths heading
CAUTION = (217, 119, 6)  # Growth areas heading


def _effective_width(pdf: FPDF) -> float:  # Compute effective page width
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


class ReportCardPDF(FPDF):  # PDF with banner header and page footer
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.header_title = "Student Report Card"
        self.footer_label = "Student Profile Assistant"
        self._font_regular = "Helvetica"
        self._font_bold = "Helvetica"
        self._supports_unicode = False

    def use_unicode_font(self) -> None:  # Switch to DejaVu when installed
        try:
            self.add_font("DejaVu", "", DEJAVU_SANS)
            self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        except (OSError, RuntimeError):
            return
        self._font_regular = "DejaVu"
        self._font_bold = "DejaVu"
        self._supports_unicode = True

    def prepare_text(self, text: Any) -> str:  # Sanitize text for core (latin-1) fonts
        value = "" if text is None else str(text)
        if self._supports_unicode:
            return value
        for source, target in (("•", "-"), ("✓", "+"), ("○", "o"), ("’", "'"), ("“", '"'), ("”", '"'), ("–", "-"), ("—", "-")):
            value = value.replace(source, target)
        return value.encode("latin-1", "ignore").decode("latin-1")

    def header(self) -> None:  # Render header banner on the first page
        if self.page_no() != 1:
            return
        self.set_fill_color(*ACCENT)
        self.rect(0, 0, self.w, 24, style="F")
        self.set_text_color(255, 255, 255)
        self.set_font(self._font_bold, "B", 20)
        self.set_xy(self.l_margin, 7)
        self.cell(_effective_width(self), 10, self.prepare_text(self.header_title), align="C")
        self.set_text_color(*TEXT)
        self.set_y(30)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-14)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(*MUTED)
        self.set_font(self._font_regular, "", 9)
        self.cell(0, 8, self.prepare_text(self.footer_label), align="L")
        self.set_x(self.l_margin)
        self.cell(0, 8, f"Page {self.page_no()}/{{nb}}", align="R")


def _section_title(pdf: ReportCardPDF, title: str, color: Tuple[int, int, int] = HEADING) -> None:  # Render section title
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*color)
    pdf.set_font(pdf._font_bold, "B", 15)
    pdf.cell(0, 9, pdf.prepare_text(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf._font_regular, "", 11)


def _lines(pdf: ReportCardPDF, lines: Sequence[str]) -> None:  # Render one paragraph per line
    for line in lines:
        pdf.set_x(pdf.l_margin)
        pdf.multi_cell(_effective_width(pdf), 6, pdf.prepare_text(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(3)


def _labelled(rows: Sequence[Tuple[str, Optional[str]]]) -> List[str]:  # Keep only populated fields
    return [f"{label}: {value}" for label, value in rows if value]


def render_report_card_pdf(card: ReportCard, *, generated_at: Optional[datetime] = None) -> bytes:  # Build PDF bytes
    pdf = ReportCardPDF()
    pdf.use_unicode_font()
    pdf.alias_nb_pages()
    pdf.set_margins(18, 18, 18)
    pdf.set_auto_page_break(auto=True, margin=18)
    pdf.add_page()

    _section_title(pdf, "Student Profile")
    profile = card.student_profile
    if profile is None:
        _lines(pdf, ["Profile information not available"])
    else:
        rows = _labelled(
            [
                ("Name", profile.name),
                ("Age", profile.age),
                ("Education Level", profile.education_level),
                ("Institution", profile.institution),
                ("Favorite Subjects", ", ".join(profile.favorite_subjects)),
                ("Challenging Subjects", ", ".join(profile.challenging_subjects)),
            ]
        )
        _lines(pdf, rows or ["Profile information not available"])

    if card.overall_summary:
        _section_title(pdf, "Overall Summary")
        _lines(pdf, [card.overall_summary])

    if card.personality_insights:
        _section_title(pdf, "Personality Insights")
        _lines(pdf, [f"• {item}" for item in card.personality_insights])

    if card.learning_profile is not None:
        lp = card.learning_profile
        rows = _labelled(
            [
                ("Preferred Style", lp.preferred_style),
                ("Study Preferences", lp.study_preferences),
                ("Ideal Environment", lp.ideal_environment),
                ("Time Management", lp.time_management),
            ]
        )
        if rows:
            _section_title(pdf, "Learning Profile")
            _lines(pdf, rows)

    if card.strengths:
        _section_title(pdf, "Strengths", POSITIVE)
        _lines(pdf, [f"✓ {item}" for item in card.strengths])

    if card.growth_areas:
        _section_title(pdf, "Growth Areas", CAUTION)
        _lines(pdf, [f"○ {item}" for item in card.growth_areas])

    if card.interests:
        _section_title(pdf, "Interests")
        _lines(pdf, [f"• {item}" for item in card.interests])

    if card.goals is not None:
        rows = _labelled(
            [
                ("Short Term", card.goals.short_term),
                ("Long Term", card.goals.long_term),
                ("Career Aspiration", card.goals.career_aspiration),
            ]
        )
        if rows:
            _section_title(pdf, "Goals & Aspirations")
            _lines(pdf, rows)

    if card.recommendations:
        _section_title(pdf, "Recommendations", ACCENT)
        _lines(pdf, [f"{idx}. {item}" for idx, item in enumerate(card.recommendations, start=1)])

    stamp = generated_at or datetime.now(timezone.utc)
    pdf.ln(6)
    pdf.set_text_color(*MUTED)
    pdf.set_font(pdf._font_regular, "", 9)
    pdf.cell(0, 6, f"Generated on {stamp.strftime('%d %b %Y')}", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    return bytes(pdf.output())


def report_filename(card: ReportCard) -> str:  # Download filename for a report card
    name = card.student_profile.name if card.student_profile and card.student_profile.name else "Student"
    safe = "".join(ch for ch in name if ch.isascii() and (ch.isalnum() or ch in ("-", "_"))) or "Student"
    return f"{safe}_Report_Card.pdf"


__all__ = ["ReportCardPDF", "render_report_card_pdf", "report_filename"]
