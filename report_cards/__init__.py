from __future__ import annotations  # Report card package exports

from .models import EMPTY_SUMMARY, Goals, LearningProfile, ReportCard, StudentProfile, empty_report_card
from .pdf import render_report_card_pdf, report_filename
from .synthesizer import parse_report_card, summarize, synthesize

__all__ = [
    "EMPTY_SUMMARY",
    "Goals",
    "LearningProfile",
    "ReportCard",
    "StudentProfile",
    "empty_report_card",
    "parse_report_card",
    "render_report_card_pdf",
    "report_filename",
    "summarize",
    "synthesize",
]
