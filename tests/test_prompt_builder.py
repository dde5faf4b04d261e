from pathlib import Path

import pytest

from examprep.models import DiagramOutput, DiagramStructure, Difficulty, FlowchartIntent
from examprep.prompt_builder import (
    build_flowchart_prompt,
    build_questions_prompt,
    build_summary_prompt,
    build_tutor_prompt,
    build_video_summary_prompt,
)
from examprep.tiers import tier_for_pages

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "src" / "examprep" / "prompts"


def test_summary_prompt_includes_tier_targets_and_schema() -> None:
    tier = tier_for_pages(7)

    prompt = build_summary_prompt("Chapter text.", tier, 7)

    assert "approximately 7 page(s)" in prompt
    assert "Summary type: comprehensive" in prompt
    assert "15-20 lines" in prompt
    assert "List 7-10 key highlights" in prompt
    assert "List 6-8 key topics" in prompt
    assert '"keyTopics"' in prompt
    assert prompt.index("Chapter text.") < prompt.index('"estimatedReadTime"')


def test_questions_prompt_requests_exact_count() -> None:
    prompt = build_questions_prompt("Notes", Difficulty.HARD, tier_for_pages(2), 30)

    assert "Difficulty level: Hard" in prompt
    assert "Document length: 2 pages" in prompt
    assert "Return exactly 30 questions" in prompt
    assert '"correctAnswer": 0' in prompt


@pytest.mark.parametrize(
    ("structure", "output", "template"),
    [
        (DiagramStructure.CLASSIFICATION, DiagramOutput.VISUAL, "flowchart_classification.txt"),
        (DiagramStructure.PROCESS, DiagramOutput.VISUAL, "flowchart_process.txt"),
        (DiagramStructure.CLASSIFICATION, DiagramOutput.TEXT, "flowchart_text_classification.txt"),
        (DiagramStructure.PROCESS, DiagramOutput.TEXT, "flowchart_text_process.txt"),
    ],
)
def test_flowchart_prompt_uses_matching_template(structure, output, template) -> None:
    first_line = (PROMPTS_DIR / template).read_text(encoding="utf-8").strip().splitlines()[0]

    prompt = build_flowchart_prompt("  Types of rocks  ", FlowchartIntent(structure, output))

    assert prompt.startswith(first_line)
    assert "Types of rocks" in prompt


def test_tutor_prompt_switches_to_live_template_with_snippet() -> None:
    plain = build_tutor_prompt("What is osmosis?")
    grounded = build_tutor_prompt("Who is the UN secretary-general?", snippet=" António Guterres ")

    assert "What is osmosis?" in plain
    assert "recent information from the web" not in plain
    assert '"António Guterres"' in grounded
    assert "Who is the UN secretary-general?" in grounded


def test_tutor_prompt_rejects_missing_question() -> None:
    with pytest.raises(ValueError):
        build_tutor_prompt(None)


def test_video_prompt_embeds_content() -> None:
    prompt = build_video_summary_prompt("Video Title: Cells 101")

    assert "Video Title: Cells 101" in prompt
    assert "8-12 sentence" in prompt
