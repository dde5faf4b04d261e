"""Deterministic artifacts served when generation or validation fails."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..models import DiagramStructure


@dataclass(frozen=True, slots=True)
class FallbackSummaryText:
    summary: str
    highlights: Tuple[str, ...]
    key_topics: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class FallbackQuestionTemplate:
    question: str
    options: Tuple[str, str, str, str]
    correct_answer: int
    explanation: str
    topic: str


CONCISE_SUMMARY = FallbackSummaryText(
    summary=(
        "This document provides essential information on the subject matter.\n"
        "It covers fundamental concepts with clear explanations.\n"
        "The content is structured to facilitate quick understanding and practical application."
    ),
    highlights=(
        "Core concepts clearly explained",
        "Practical applications provided",
        "Essential information covered",
    ),
    key_topics=("Fundamental Concepts", "Key Principles", "Practical Applications"),
)

MODERATE_SUMMARY = FallbackSummaryText(
    summary=(
        "This document offers comprehensive coverage of the subject matter with detailed explanations of core concepts.\n"
        "It includes theoretical foundations and practical applications to enhance understanding.\n"
        "The material is well-structured with clear examples and case studies.\n"
        "Key methodologies and best practices are thoroughly discussed.\n"
        "The content provides valuable insights for both beginners and advanced learners."
    ),
    highlights=(
        "Comprehensive coverage of core concepts and principles",
        "Detailed theoretical foundations with practical applications",
        "Well-structured content with clear examples and case studies",
        "Key methodologies and best practices thoroughly explained",
        "Valuable insights for learners at different levels",
    ),
    key_topics=("Theoretical Framework", "Practical Applications", "Case Studies", "Best Practices"),
)

COMPREHENSIVE_SUMMARY = FallbackSummaryText(
    summary=(
        "This comprehensive document provides extensive coverage of the subject matter with in-depth analysis of core concepts and principles.\n"
        "It begins with fundamental theoretical foundations and progressively builds to advanced topics and specialized applications.\n"
        "The material includes detailed explanations, numerous examples and comprehensive case studies that illustrate real-world implementations.\n"
        "Key methodologies and industry standards are thoroughly examined throughout multiple sections.\n"
        "The document offers valuable insights for practitioners, researchers and students at various levels of expertise.\n"
        "Advanced topics are explored with careful attention to current trends and future developments in the field.\n"
        "The content is meticulously organized to facilitate both sequential reading and selective reference use.\n"
        "Practical guidelines and actionable recommendations support immediate application of the concepts.\n"
        "The document serves as both an educational resource and a professional reference guide.\n"
        "Critical analysis and comparative studies deepen understanding across different approaches.\n"
        "Contemporary challenges and emerging solutions are addressed with forward-looking perspectives.\n"
        "Its breadth makes it an essential resource for anyone seeking a thorough understanding of the subject.\n"
        "Integration of theory and practice is emphasized throughout to ensure practical relevance.\n"
        "Each section connects back to the central themes introduced at the start.\n"
        "The document concludes with a synthesis of key learnings and recommendations for further exploration."
    ),
    highlights=(
        "Extensive coverage with in-depth analysis of core concepts and advanced principles",
        "Progressive structure from fundamental foundations to specialized applications",
        "Comprehensive case studies illustrating real-world implementations and best practices",
        "Thorough examination of methodologies, industry standards and current trends",
        "Valuable insights for practitioners, researchers and students at all expertise levels",
        "Advanced topics explored with attention to future developments and emerging solutions",
        "Meticulously organized for both sequential reading and selective reference use",
        "Practical guidelines and actionable recommendations for immediate application",
        "Critical analysis and comparative studies across different approaches and methodologies",
        "Integration of theory and practice emphasized throughout for practical relevance",
    ),
    key_topics=(
        "Theoretical Foundations",
        "Advanced Applications",
        "Industry Standards",
        "Best Practices",
        "Case Studies",
        "Emerging Trends",
        "Practical Guidelines",
        "Comparative Analysis",
    ),
)

FALLBACK_SUMMARIES = {
    "concise": CONCISE_SUMMARY,
    "moderate": MODERATE_SUMMARY,
    "comprehensive": COMPREHENSIVE_SUMMARY,
}

FALLBACK_QUESTIONS: Tuple[FallbackQuestionTemplate, ...] = (
    FallbackQuestionTemplate(
        question="What is the primary focus of this document?",
        options=(
            "Theoretical concepts and principles",
            "Practical implementation only",
            "Historical overview",
            "Future predictions",
        ),
        correct_answer=0,
        explanation=(
            "The document primarily focuses on theoretical concepts and principles as evidenced by "
            "the structured approach to explaining fundamental ideas."
        ),
        topic="Core Concepts",
    ),
    FallbackQuestionTemplate(
        question="Which methodology is emphasized throughout the content?",
        options=(
            "Experimental approach",
            "Systematic analysis",
            "Random sampling",
            "Intuitive reasoning",
        ),
        correct_answer=1,
        explanation=(
            "The content emphasizes systematic analysis as the preferred methodology for "
            "understanding complex topics."
        ),
        topic="Methodology",
    ),
    FallbackQuestionTemplate(
        question="What is the key takeaway from the practical examples provided?",
        options=(
            "Theory and practice must be integrated",
            "Practice is more important than theory",
            "Examples are merely illustrative",
            "Practical applications are limited",
        ),
        correct_answer=0,
        explanation="The examples demonstrate that theory and practice must be integrated for complete understanding.",
        topic="Practical Applications",
    ),
)

CLASSIFICATION_DIAGRAM = """flowchart TD
    A((Start Classification)) --> B[Main Category]
    B --> C{Type A?}
    B --> D{Type B?}
    B --> E{Type C?}
    C -->|Yes| F[Subcategory A1]
    C -->|No| G[Subcategory A2]
    D -->|Yes| H[Subcategory B1]
    D -->|No| I[Subcategory B2]
    E -->|Yes| J[Subcategory C1]
    E -->|No| K[Subcategory C2]
    F --> L((Classification Complete))
    G --> L
    H --> L
    I --> L
    J --> L
    K --> L"""

PROCESS_DIAGRAM = """flowchart TD
    A((Start Process)) --> B[Identify Requirements]
    B --> C[Plan Approach]
    C --> D{Resources Available?}
    D -->|Yes| E[Execute Plan]
    D -->|No| F[Acquire Resources]
    F --> E
    E --> G{Quality Check}
    G -->|Pass| H[Complete Process]
    G -->|Fail| I[Review & Improve]
    I --> C
    H --> J((End))"""

STUDY_DIAGRAM = """flowchart TD
    A((Start)) --> B[Understand Topic]
    B --> C[Gather Information]
    C --> D[Analyze Data]
    D --> E{Need More Info?}
    E -->|Yes| C
    E -->|No| F[Draw Conclusions]
    F --> G[Take Action]
    G --> H((Complete))"""

CLASSIFICATION_TEXT_CHART = """                    [Main Topic]
                         |
            +------------+------------+
            |            |            |
      [Category A]  [Category B]  [Category C]
            |            |            |
     +------+------+     |      +-----+-----+
     |      |      |     |      |           |
 [Sub A1][Sub A2][Sub A3] [Sub B1] [Sub C1] [Sub C2]
     |      |      |     |      |           |
 [Ex A1] [Ex A2] [Ex A3]  [Ex B1]  [Ex C1]  [Ex C2]"""

PROCESS_TEXT_CHART = """        ((Start))
            |
            v
    [Identify Requirements]
            |
            v
      [Plan Approach]
            |
            v
   {Resources Available?}
           / \\
      Yes /   \\ No
         /     \\
        v       v
[Execute Plan] [Acquire Resources]
        |           |
        |           v
        |    [Execute Plan]
        |           |
        v           v
      {Quality Check}
           / \\
     Pass /   \\ Fail
         /     \\
        v       v
  [Complete] [Review & Improve]
        |           |
        v           v
    ((End))    [Plan Approach]"""

_PROCESS_HINTS = ("process", "workflow", "how")


def fallback_summary_text(tier_label: str) -> FallbackSummaryText:
    return FALLBACK_SUMMARIES.get(tier_label, CONCISE_SUMMARY)


def fallback_diagram(prompt: str, structure: DiagramStructure) -> str:
    """Pick the canned Mermaid diagram for a request."""

    if structure is DiagramStructure.CLASSIFICATION:
        return CLASSIFICATION_DIAGRAM
    lowered = prompt.lower()
    if any(hint in lowered for hint in _PROCESS_HINTS):
        return PROCESS_DIAGRAM
    return STUDY_DIAGRAM


def fallback_text_chart(structure: DiagramStructure) -> str:
    if structure is DiagramStructure.CLASSIFICATION:
        return CLASSIFICATION_TEXT_CHART
    return PROCESS_TEXT_CHART


__all__ = [
    "CLASSIFICATION_DIAGRAM",
    "CLASSIFICATION_TEXT_CHART",
    "FALLBACK_QUESTIONS",
    "FALLBACK_SUMMARIES",
    "FallbackQuestionTemplate",
    "FallbackSummaryText",
    "PROCESS_DIAGRAM",
    "PROCESS_TEXT_CHART",
    "STUDY_DIAGRAM",
    "fallback_diagram",
    "fallback_summary_text",
    "fallback_text_chart",
]
