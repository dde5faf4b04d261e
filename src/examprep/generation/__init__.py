"""Generators that turn document content into study artifacts."""
from __future__ import annotations

from .diagram_validation import DiagramValidationError, is_valid_diagram, validate_diagram
from .flowchart import DiagramExport, FlowchartGenerator, classify_intent, export_diagram
from .parsing import ParseOutcome, parse_json_object, strip_code_fences
from .questions import QuestionGenerator
from .summary import SummaryGenerator

__all__ = [
    "DiagramExport",
    "DiagramValidationError",
    "FlowchartGenerator",
    "ParseOutcome",
    "QuestionGenerator",
    "SummaryGenerator",
    "classify_intent",
    "export_diagram",
    "is_valid_diagram",
    "parse_json_object",
    "strip_code_fences",
    "validate_diagram",
]
