import json
import time
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from promptcraftr.agent.commands import (
    Answer,
    Back,
    Compile,
    Import,
    Malformed,
    Reset,
    Set,
    Show,
    Skip,
    Unknown,
    parse_command,
)
from promptcraftr.prompts.compiler import compile_prompt, summarize_draft
from promptcraftr.prompts.steps import (
    ALL_CAPTURED,
    ANSWER_ACK,
    AT_FIRST_STEP,
    DRAFT_KEYS,
    DRAFT_SUMMARY,
    FIELD_UPDATED,
    IMPORT_ACK,
    INTRO_MSG,
    NOTHING_LEFT,
    SET_USAGE,
    SKIPPED,
    STEPS,
    UNKNOWN_COMMAND,
    UNKNOWN_FIELD,
    empty_draft,
    field_names,
    resolve_field,
    step_prompt,
)
from promptcraftr.utils.core import _debug
from promptcraftr.utils.storage import DRAFT_KEY, MESSAGES_KEY, STEP_KEY

ASSISTANT = "assistant"
USER = "user"
ROLES = (ASSISTANT, USER)

CAPTURED = "Captured"
IN_PROGRESS = "In progress"
PENDING = "Pending"


def _now_ms() -> int:
    return int(time.time() * 1000)


class Message(NamedTuple):
    role: str
    text: str
    ts: int

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "text": self.text, "ts": self.ts}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        if not isinstance(data, dict) or data.get("role") not in ROLES or not isinstance(data.get("text"), str):
            raise ValueError(f"Not a chat message: {data!r}")
        ts = data.get("ts")
        return cls(data["role"], data["text"], int(ts) if isinstance(ts, (int, float)) else 0)


def intro_log() -> List[Message]:
    return [Message(ASSISTANT, INTRO_MSG, _now_ms())]


class WizardSession:
    """The three pieces of session state, persisted together."""

    def __init__(self, draft=None, step_index: int = 0, messages=None):
        self.draft: Dict[str, str] = draft if draft is not None else empty_draft()
        self.step_index: int = step_index
        self.messages: List[Message] = messages if messages is not None else intro_log()

    @property
    def finished(self) -> bool:
        return self.step_index >= len(STEPS)

    @property
    def current_step(self):
        return None if self.finished else STEPS[self.step_index]


# ----------------------------- Slot decoding ---------------------------------

def _decode_messages(raw: Optional[str]) -> List[Message]:
    if raw is None:
        return intro_log()
    try:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError("message log is not a list")
        return [Message.from_dict(item) for item in data]
    except Exception as e:
        _debug(f"discarding stored messages: {e}")
        return intro_log()


def _decode_draft(raw: Optional[str]) -> Dict[str, str]:
    draft = empty_draft()
    if raw is None:
        return draft
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("draft is not an object")
    except Exception as e:
        _debug(f"discarding stored draft: {e}")
        return draft
    for key in DRAFT_KEYS:
        value = data.get(key)
        if isinstance(value, str):
            draft[key] = value
    return draft


def _decode_step(raw: Optional[str]) -> int:
    if raw is None:
        return 0
    try:
        value = json.loads(raw)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"step index is not an integer: {value!r}")
    except Exception as e:
        _debug(f"discarding stored step index: {e}")
        return 0
    return max(0, min(value, len(STEPS)))


# ----------------------------- Controller ---------------------------------

class PromptWizard:
    """
    Owns one wizard session and its storage.

    Every user line goes through ``send``: the line is echoed into the log,
    parsed into a command, dispatched, and the session is saved.
    """

    def __init__(self, store, session: Optional[WizardSession] = None):
        self.store = store
        self.session = session or WizardSession()

    @property
    def draft(self) -> Dict[str, str]:
        return self.session.draft

    @property
    def step_index(self) -> int:
        return self.session.step_index

    @property
    def messages(self) -> List[Message]:
        return self.session.messages

    # -- storage boundary --

    def load(self) -> "PromptWizard":
        def read(key: str) -> Optional[str]:
            try:
                return self.store.get(key)
            except Exception as e:
                _debug(f"store read failed for {key}: {e}")
                return None

        self.session = WizardSession(
            draft=_decode_draft(read(DRAFT_KEY)),
            step_index=_decode_step(read(STEP_KEY)),
            messages=_decode_messages(read(MESSAGES_KEY)),
        )
        return self

    def save(self) -> None:
        try:
            self.store.set(MESSAGES_KEY, json.dumps([m.to_dict() for m in self.messages], ensure_ascii=False))
            self.store.set(DRAFT_KEY, json.dumps(self.draft, ensure_ascii=False))
            self.store.set(STEP_KEY, json.dumps(self.step_index))
        except Exception as e:
            _debug(f"store write failed: {e}")

    # -- chat --

    def _say(self, text: str) -> None:
        self.messages.append(Message(ASSISTANT, text, _now_ms()))

    def send(self, text: str) -> Optional[str]:
        """
        Handle one line of user input.

        Args:
            text (str): Raw input. Surrounding whitespace is ignored.

        Returns:
            Optional[str]: The compiled prompt for ``/compile``, otherwise None.
        """
        text = (text or "").strip()
        if not text:
            return None

        self.messages.append(Message(USER, text, _now_ms()))
        compiled = self.dispatch(parse_command(text))
        self.save()
        return compiled

    def dispatch(self, command) -> Optional[str]:
        if isinstance(command, Answer):
            if self.session.finished:
                self._say(NOTHING_LEFT)
            else:
                self.accept_answer(command.text)
        elif isinstance(command, Reset):
            self.reset()
        elif isinstance(command, Show):
            self.show_draft()
        elif isinstance(command, Compile):
            return self.compile()
        elif isinstance(command, Import):
            self.import_text(command.payload)
        elif isinstance(command, Back):
            self.back()
        elif isinstance(command, Skip):
            self.skip()
        elif isinstance(command, Set):
            self.set_field(command.field, command.value)
        elif isinstance(command, Malformed):
            self._say(SET_USAGE)
        elif isinstance(command, Unknown):
            self._say(UNKNOWN_COMMAND.format(command=command.raw.split()[0]))
        else:
            raise TypeError(f"Unhandled command: {command!r}")
        return None

    def _advance(self) -> None:
        self.session.step_index += 1
        if self.session.finished:
            self.session.step_index = len(STEPS)
            self._say(ALL_CAPTURED)
        else:
            self._say(step_prompt(self.step_index))

    def accept_answer(self, text: str) -> None:
        """Record ``text`` for the active step and move to the next one."""
        if not text or self.session.finished:
            return
        current = STEPS[self.step_index]
        self.draft[current.key] = text
        next_label = STEPS[self.step_index + 1].label if self.step_index + 1 < len(STEPS) else "Compile"
        self._say(ANSWER_ACK.format(label=current.label, summary=summarize_draft(self.draft), next_label=next_label))
        self._advance()

    def skip(self) -> None:
        if self.session.finished:
            self._say(NOTHING_LEFT)
            return
        self._say(SKIPPED.format(label=self.session.current_step.label))
        self._advance()

    def back(self) -> None:
        if self.step_index == 0:
            self._say(AT_FIRST_STEP)
        else:
            self.session.step_index -= 1
        self._say(step_prompt(self.step_index))

    def set_field(self, field: str, value: str) -> None:
        key = resolve_field(field)
        if key is None:
            self._say(UNKNOWN_FIELD.format(field=field, fields=", ".join(field_names())))
            return
        self.draft[key] = value
        label = next(step.label for step in STEPS if step.key == key)
        self._say(FIELD_UPDATED.format(label=label))

    def show_draft(self) -> None:
        self._say(DRAFT_SUMMARY.format(summary=summarize_draft(self.draft)))

    def compile(self) -> str:
        return compile_prompt(self.draft)

    def import_text(self, payload: str) -> None:
        # Payload is intentionally not parsed or stored.
        self._say(IMPORT_ACK)

    def reset(self) -> None:
        self.session = WizardSession()

    def wipe(self) -> None:
        """Clear the whole store and restart from the initial state."""
        try:
            self.store.clear()
        except Exception as e:
            _debug(f"store clear failed: {e}")
        self.reset()
        self.save()

    # -- views --

    def progress(self) -> List[Tuple[int, str, str]]:
        rows = []
        for index, step in enumerate(STEPS):
            if self.draft.get(step.key):
                status = CAPTURED
            elif index == self.step_index:
                status = IN_PROGRESS
            else:
                status = PENDING
            rows.append((index + 1, step.label, status))
        return rows

    def placeholder(self) -> str:
        step = self.session.current_step
        return step.question if step else "Type a message or use /commands"
