"""Flowchart generation with validation and deterministic fallbacks."""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

from ..models import (
    ArtifactSource,
    DiagramKind,
    DiagramOutput,
    DiagramStructure,
    FlowchartArtifact,
    FlowchartIntent,
)
from ..prompt_builder import build_flowchart_prompt
from ..providers.base import CompletionError, CompletionProvider
from ..telemetry import emit_completion_request, emit_completion_result, emit_fallback_event
from .diagram_validation import DiagramValidationError, validate_diagram
from .fallbacks import fallback_diagram, fallback_text_chart
from .parsing import strip_code_fences

LOGGER = logging.getLogger(__name__)

CLASSIFICATION_KEYWORDS = (
    "classify",
    "classification",
    "categories",
    "categorize",
    "types of",
    "kinds of",
    "taxonomy",
    "hierarchy",
    "breakdown",
    "organize",
    "group",
    "divide",
    "separate",
    "sort",
    "arrange",
    "structure",
)

TEXT_FORMAT_KEYWORDS = (
    "text format",
    "plain text",
    "ascii",
    "text-based",
    "text style",
    "using text",
    "in text",
    "text form",
    "text only",
    "ascii style",
    "plain format",
    "text representation",
    "textual format",
)

_DIAGRAM_LINE_START = re.compile(r"^[ \t]*(?:flowchart|graph)\b", re.IGNORECASE | re.MULTILINE)
_DIAGRAM_START = re.compile(r"\b(?:flowchart|graph)\b", re.IGNORECASE)


def classify_intent(prompt: str) -> FlowchartIntent:
    lowered = (prompt or "").lower()
    if any(keyword in lowered for keyword in CLASSIFICATION_KEYWORDS):
        structure = DiagramStructure.CLASSIFICATION
    else:
        structure = DiagramStructure.PROCESS
    if any(keyword in lowered for keyword in TEXT_FORMAT_KEYWORDS):
        output = DiagramOutput.TEXT
    else:
        output = DiagramOutput.VISUAL
    return FlowchartIntent(structure=structure, output=output)


def locate_diagram(text: str) -> Optional[str]:
    """Drop any prose before the diagram header.

    A keyword opening a line wins over one buried in a sentence.
    """

    match = _DIAGRAM_LINE_START.search(text) or _DIAGRAM_START.search(text)
    if match is None:
        return None
    return text[match.start():].strip()


@dataclass(frozen=True, slots=True)
class DiagramExport:
    file_name: str
    media_type: str
    body: str


def export_diagram(artifact: FlowchartArtifact, base_name: str = "flowchart") -> DiagramExport:
    """Package a diagram as downloadable grammar text."""

    if artifact.kind is DiagramKind.MERMAID:
        return DiagramExport(f"{base_name}.mmd", "text/vnd.mermaid", artifact.body)
    return DiagramExport(f"{base_name}.txt", "text/plain", artifact.body)


class FlowchartGenerator:
    """Turn a free-text request into a Mermaid diagram or an ASCII chart."""

    def __init__(self, completion: CompletionProvider) -> None:
        self._completion = completion

    async def generate(self, prompt: str) -> FlowchartArtifact:
        intent = classify_intent(prompt)
        if intent.output is DiagramOutput.TEXT:
            return await self._generate_text(prompt, intent)
        return await self._generate_visual(prompt, intent)

    async def regenerate(self, artifact: FlowchartArtifact) -> FlowchartArtifact:
        return await self.generate(artifact.prompt)

    async def _complete(self, operation: str, prompt: str, intent: FlowchartIntent) -> str:
        request = build_flowchart_prompt(prompt, intent)
        emit_completion_request(operation=operation, prompt=request)
        started = time.perf_counter()
        response = await self._completion.complete(request)
        emit_completion_result(
            operation=operation,
            duration_ms=(time.perf_counter() - started) * 1000.0,
            response=response,
        )
        return response

    async def _generate_visual(self, prompt: str, intent: FlowchartIntent) -> FlowchartArtifact:
        try:
            response = await self._complete("flowchart", prompt, intent)
        except CompletionError as error:
            LOGGER.warning("Flowchart completion failed: %s", error)
            return self._visual_fallback(prompt, intent, reason=str(error))

        diagram = locate_diagram(strip_code_fences(response))
        if diagram is None:
            LOGGER.warning("Flowchart response did not contain a diagram header")
            return self._visual_fallback(prompt, intent, reason="no diagram header")
        try:
            validate_diagram(diagram)
        except DiagramValidationError as error:
            LOGGER.warning("Generated diagram rejected: %s", error)
            return self._visual_fallback(prompt, intent, reason=error.reason)

        return FlowchartArtifact(
            kind=DiagramKind.MERMAID,
            body=diagram,
            prompt=prompt,
            intent=intent,
            source=ArtifactSource.AI,
        )

    async def _generate_text(self, prompt: str, intent: FlowchartIntent) -> FlowchartArtifact:
        try:
            response = await self._complete("flowchart.text", prompt, intent)
        except CompletionError as error:
            LOGGER.warning("Text flowchart completion failed: %s", error)
            return self._text_fallback(prompt, intent, reason=str(error))

        body = strip_code_fences(response)
        if not body:
            return self._text_fallback(prompt, intent, reason="empty response")
        return FlowchartArtifact(
            kind=DiagramKind.TEXT,
            body=body,
            prompt=prompt,
            intent=intent,
            source=ArtifactSource.AI,
        )

    @staticmethod
    def _visual_fallback(prompt: str, intent: FlowchartIntent, *, reason: str) -> FlowchartArtifact:
        emit_fallback_event(operation="flowchart", reason=reason)
        return FlowchartArtifact(
            kind=DiagramKind.MERMAID,
            body=fallback_diagram(prompt, intent.structure),
            prompt=prompt,
            intent=intent,
            source=ArtifactSource.FALLBACK,
        )

    @staticmethod
    def _text_fallback(prompt: str, intent: FlowchartIntent, *, reason: str) -> FlowchartArtifact:
        emit_fallback_event(operation="flowchart.text", reason=reason)
        return FlowchartArtifact(
            kind=DiagramKind.TEXT,
            body=fallback_text_chart(intent.structure),
            prompt=prompt,
            intent=intent,
            source=ArtifactSource.FALLBACK,
        )


__all__ = [
    "CLASSIFICATION_KEYWORDS",
    "DiagramExport",
    "FlowchartGenerator",
    "TEXT_FORMAT_KEYWORDS",
    "classify_intent",
    "export_diagram",
    "locate_diagram",
]
