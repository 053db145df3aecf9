from typing import Dict, List, NamedTuple, Tuple


class StepDefinition(NamedTuple):
    """
    One question of the guided flow.

    Attributes:
        key (str): Draft field filled by the answer.
        label (str): Display name used in chat and in the progress list.
        question (str): The question shown to the user.
        quick (tuple): Suggested answers, shown as bullets. Advisory only.
    """

    key: str
    label: str
    question: str
    quick: Tuple[str, ...]


STEPS: Tuple[StepDefinition, ...] = (
    StepDefinition(
        "InitialIdea",
        "Initial Idea",
        "What’s your initial idea or high-level outcome you want the AI to achieve?",
        ("Brainstorm topic ideas", "Summarize a long document", "Draft a professional email", "Write code from a spec"),
    ),
    StepDefinition(
        "Role",
        "Role",
        "What persona should the AI adopt? (e.g., expert analyst, friendly coach, technical writer)",
        ("Expert financial analyst", "Senior software engineer", "Marketing strategist", "Recruiter & resume coach"),
    ),
    StepDefinition(
        "Task",
        "Task",
        "What specific action or goal should it accomplish?",
        ("Produce a step-by-step plan", "Generate a comparison table", "Draft a cold outreach email", "Refactor code for clarity"),
    ),
    StepDefinition(
        "Context",
        "Context",
        "Provide background, data, links, constraints, tools, or domain details that matter.",
        ("Include URL(s) to source text", "List constraints & requirements", "Mention tools or environment"),
    ),
    StepDefinition(
        "Reasoning",
        "Reasoning",
        "How should the AI reason? (We recommend concise, structured rationale without hidden chain-of-thought.)",
        ("Explain assumptions succinctly", "List key decision steps", "Justify choices briefly"),
    ),
    StepDefinition(
        "OutputFormat",
        "Output Format",
        "How should the output be structured? (length, bullets, JSON, sections, headings)",
        ("Bulleted outline with headings", "JSON object (schema included)", "1-page brief (~400–600 words)", "Markdown with sections"),
    ),
    StepDefinition(
        "StopConditions",
        "Stop Conditions / Constraints",
        "What must be avoided or limited? (e.g., don’t mention brands, stay under 700 words)",
        ("Avoid brand names", "No screenshots or images", "Cite sources if used", "<700 words total"),
    ),
    StepDefinition(
        "Audience",
        "Audience",
        "Who is the audience and what’s their expertise level?",
        ("Executive team (non-technical)", "Developers (intermediate)", "New customers (novice)", "Academic reviewers"),
    ),
    StepDefinition(
        "ToneStyle",
        "Tone / Style",
        "What tone should the AI use? (e.g., formal, friendly, persuasive, witty)",
        ("Professional and direct", "Friendly and encouraging", "Persuasive and confident", "Neutral and objective"),
    ),
    StepDefinition(
        "Examples",
        "Examples",
        "Any examples to emulate? Paste samples or describe desired qualities.",
        ("Emulate Apple-style clarity", "Use Amazon PR/FAQ format", "Model after the sample below"),
    ),
)

DRAFT_KEYS: Tuple[str, ...] = tuple(step.key for step in STEPS)


def _lookup_table() -> Dict[str, str]:
    table: Dict[str, str] = {}
    for step in STEPS:
        table[step.key.lower()] = step.key
        table[step.label.lower()] = step.key
        # "Tone/Style" and "Tone / Style" both resolve
        table[step.label.replace(" ", "").lower()] = step.key
    return table


LABEL_TO_KEY: Dict[str, str] = _lookup_table()


def empty_draft() -> Dict[str, str]:
    return {key: "" for key in DRAFT_KEYS}


def resolve_field(name: str) -> str | None:
    """Map a user-typed field name (key or label, any case) to a draft key."""
    if not name:
        return None
    cleaned = name.strip().lower()
    return LABEL_TO_KEY.get(cleaned) or LABEL_TO_KEY.get(cleaned.replace(" ", ""))


# ----------------------------- Message templates ---------------------------------

INTRO_MSG = """Hi! I’m your Prompt Engineering Assistant.
We’ll build a strong prompt together in a few quick steps.

**Step 1 — Initial Idea**
What’s your initial idea or high-level outcome you want the AI to achieve?

(You can type /reset, /back, /skip, /compile, /show, /set <field>: <value>, or /import <text>.)"""

STEP_PROMPT = """**Step {number} — {label}**
{question}

*Quick choices (just type):*
{tips}"""

ANSWER_ACK = """Got it for **{label}**.

**Draft so far:**
{summary}

Next: **{next_label}**."""

DRAFT_SUMMARY = """Here’s what we’ve captured so far:

{summary}

Edit anything with `/set <field>: <value>` or keep answering to continue."""

NOTHING_CAPTURED = "(Nothing captured yet.)"

ALL_CAPTURED = "We’ve gathered all components. Type /compile to generate the final prompt."

NOTHING_LEFT = "Type /compile to generate the final prompt, or update any field (e.g., `/set Tone/Style: professional`)."

IMPORT_ACK = "Imported (mock). Use /show to review."

UNKNOWN_COMMAND = "Unknown command `{command}`. Available: /reset, /back, /skip, /compile, /show, /set <field>: <value>, /import <text>."

SET_USAGE = "Usage: `/set <field>: <value>` (e.g., `/set Tone/Style: professional`)."

SKIPPED = "Skipped **{label}**."

AT_FIRST_STEP = "You’re already at the first step."

FIELD_UPDATED = "Updated **{label}**."

UNKNOWN_FIELD = "I don’t know a field called `{field}`. Fields: {fields}."


def quick_tips(step: StepDefinition) -> str:
    return "\n".join(f"• {q}" for q in step.quick)


def step_prompt(index: int) -> str:
    step = STEPS[index]
    return STEP_PROMPT.format(number=index + 1, label=step.label, question=step.question, tips=quick_tips(step))


def field_names() -> List[str]:
    return [step.label for step in STEPS]
