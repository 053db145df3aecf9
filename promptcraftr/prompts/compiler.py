from typing import Mapping, Tuple

from promptcraftr.prompts.steps import NOTHING_CAPTURED

REASONING_DEFAULT = (
    "Show structured reasoning without revealing hidden chain-of-thought; "
    "explain key steps and assumptions succinctly."
)

TONE_DEFAULT = "Supportive, clear, and conversational (≈8th-grade reading level unless otherwise requested)."

# (heading, draft key, fallback) in output order
SECTIONS: Tuple[Tuple[str, str, str], ...] = (
    ("Role", "Role", "(not specified)"),
    ("Task", "Task", "(not specified)"),
    ("Context", "Context", "(none provided)"),
    ("Reasoning Instructions", "Reasoning", REASONING_DEFAULT),
    ("Output Format", "OutputFormat", "(not specified)"),
    ("Stop Conditions / Constraints", "StopConditions", "(none)"),
    ("Audience", "Audience", "(not specified)"),
    ("Tone/Style", "ToneStyle", TONE_DEFAULT),
    ("Examples", "Examples", "(none)"),
)

CLOSING_INSTRUCTION = "If any critical info is missing, ask targeted follow-up questions before executing."

IDEA_PREVIEW_CHARS = 120


def _field(draft: Mapping, key: str) -> str:
    value = draft.get(key) if draft else None
    return value if isinstance(value, str) else ""


def compile_prompt(draft: Mapping) -> str:
    """
    Render the draft into the final prompt document.

    Each section is a markdown heading followed by the user's answer, or the
    section's fallback when the answer is empty. User text is not escaped.

    Args:
        draft (Mapping): Draft record keyed by step key. Missing keys count as empty.

    Returns:
        str: The compiled prompt.
    """
    blocks = [f"# {heading}\n{_field(draft, key) or fallback}" for heading, key, fallback in SECTIONS]
    blocks.append(CLOSING_INSTRUCTION)
    return "\n\n".join(blocks)


def summarize_draft(draft: Mapping) -> str:
    """Headline recap of the draft: idea, role, task and audience, when set."""
    idea = _field(draft, "InitialIdea")
    if len(idea) > IDEA_PREVIEW_CHARS:
        idea = idea[:IDEA_PREVIEW_CHARS] + "…"
    lines = [
        idea and f"• Idea: {idea}",
        _field(draft, "Role") and f"• Role: {_field(draft, 'Role')}",
        _field(draft, "Task") and f"• Task: {_field(draft, 'Task')}",
        _field(draft, "Audience") and f"• Audience: {_field(draft, 'Audience')}",
    ]
    return "\n".join(line for line in lines if line) or NOTHING_CAPTURED
