"""Utilities for constructing prompts for the study assistant."""
from __future__ import annotations

from pathlib import Path

from .models import DiagramOutput, DiagramStructure, Difficulty, FlowchartIntent
from .tiers import Tier

_PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"


def _load_template(name: str) -> str:
    """Read and trim the contents of a template file."""
    return (_PROMPTS_DIR / name).read_text(encoding="utf-8").strip()


_SUMMARY_TEMPLATE = _load_template("summary.txt")
_QUESTIONS_TEMPLATE = _load_template("questions.txt")
_FLOWCHART_TEMPLATES = {
    (DiagramStructure.CLASSIFICATION, DiagramOutput.VISUAL): _load_template("flowchart_classification.txt"),
    (DiagramStructure.PROCESS, DiagramOutput.VISUAL): _load_template("flowchart_process.txt"),
    (DiagramStructure.CLASSIFICATION, DiagramOutput.TEXT): _load_template("flowchart_text_classification.txt"),
    (DiagramStructure.PROCESS, DiagramOutput.TEXT): _load_template("flowchart_text_process.txt"),
}
_VIDEO_TEMPLATE = _load_template("video_summary.txt")
_TUTOR_TEMPLATE = _load_template("tutor.txt")
_LIVE_INFO_TEMPLATE = _load_template("live_info.txt")


def build_summary_prompt(content: str, tier: Tier, pages: int) -> str:
    if tier.max_pages is None:
        guidance = "- Include detailed coverage of the main sections and important subtopics."
    elif tier.max_pages <= 1:
        guidance = "- Keep it brief but capture the essential message."
    else:
        guidance = "- Balance breadth and detail across the main sections."

    return _SUMMARY_TEMPLATE.format(
        pages=pages,
        label=tier.label,
        summary_lines=Tier.describe(tier.summary_lines),
        highlight_count=Tier.describe(tier.highlight_count),
        topic_count=Tier.describe(tier.topic_count),
        guidance=guidance,
        content=content,
    )


def build_questions_prompt(content: str, difficulty: Difficulty, tier: Tier, count: int) -> str:
    return _QUESTIONS_TEMPLATE.format(
        difficulty=difficulty.value.capitalize(),
        length_label=tier.length_label,
        content=content,
        count=count,
    )


def build_flowchart_prompt(prompt: str, intent: FlowchartIntent) -> str:
    template = _FLOWCHART_TEMPLATES[(intent.structure, intent.output)]
    return template.format(prompt=prompt.strip())


def build_video_summary_prompt(video_content: str) -> str:
    return _VIDEO_TEMPLATE.format(content=video_content)


def build_tutor_prompt(question: str, snippet: str | None = None) -> str:
    """Compose the general tutor prompt, grounding it in a web snippet when one is available."""

    if question is None:
        raise ValueError("question must not be None")
    if snippet:
        return _LIVE_INFO_TEMPLATE.format(snippet=snippet.strip(), question=question.strip())
    return _TUTOR_TEMPLATE.format(question=question.strip())


__all__ = [
    "build_flowchart_prompt",
    "build_questions_prompt",
    "build_summary_prompt",
    "build_tutor_prompt",
    "build_video_summary_prompt",
]
