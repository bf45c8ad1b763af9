"""
Permission prompt classifier for Codex CLI panes.

Codex renders every approval dialog as a selection list with the affirmative
option pre-selected:

    Style A (command execution): "Would you like to run the following command?"
            with "Yes, just this once" / "No, and tell Codex"
    Style B (file changes): "Would you like to make the following edits?"
            with "Yes, just this once" / "No, and tell Codex"
    Style C (tool approval): "Approve app tool call?"
            with "Run the tool and continue" / "Decline this tool call"
    Style D (trust directory): "Do you trust the contents of this directory?"
            with "Yes, continue"
    Style E (full access): "Enable full access?"
            with "Yes, continue anyway" / "Go back"
    Style F (network/host): "Allow Codex to ..."
            with "Yes, just this once" / "Yes, and allow this host"

Matching a single phrase fires on ordinary narration, so a dialog needs the
question header plus one option signal, or both option signals when the header
has scrolled out of view. Text that quotes a whole dialog (a transcript, a
test fixture) still matches; that false positive is accepted.
"""

import enum
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Tuple

# Dialogs render at the bottom of the pane; older scrollback must not match
DIALOG_WINDOW = 25
ELICITATION_WINDOW = 15

# ANSI CSI sequences: ESC [ ... final_byte
ANSI_CSI = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

# OSC sequences: ESC ] ... (BEL or ST)
ANSI_OSC = re.compile(r"\x1b\][^\x07\x1b]*(\x07|\x1b\\)")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from captured text."""
    return ANSI_CSI.sub("", ANSI_OSC.sub("", text))


def tail_lines(text: str, count: int) -> str:
    """Return the last `count` lines of text."""
    return "\n".join(text.rstrip("\n").split("\n")[-count:])


# ---------------------------------------------------------------------------
# Signals and phrase sets
# ---------------------------------------------------------------------------

class Signal(enum.Enum):
    """Independently matchable phrase categories, in pattern order."""
    QUESTION = "question"
    APPROVAL_OPTION = "approval"
    CONTEXT_OPTION = "context"


class DialogKind(enum.Enum):
    RUN_COMMAND = "run_command"
    MAKE_EDITS = "make_edits"
    TOOL_CALL = "tool_call"
    TRUST_DIRECTORY = "trust_directory"
    FULL_ACCESS = "full_access"
    NETWORK_ACCESS = "network_access"


@dataclass(frozen=True)
class PhraseSet:
    """Named group of case-insensitive phrases."""
    name: str
    phrases: Tuple[str, ...]
    _regex: "re.Pattern" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Apostrophes differ between Codex builds, so any character is accepted
        alternatives = [re.escape(p).replace("'", ".") for p in self.phrases]
        object.__setattr__(
            self, "_regex", re.compile("|".join(alternatives), re.IGNORECASE)
        )

    def search(self, text: str) -> bool:
        return self._regex.search(text) is not None


# Primary signal: one question header per dialog kind
QUESTION_PHRASES = {
    DialogKind.RUN_COMMAND: PhraseSet("run_command", ("Would you like to run",)),
    DialogKind.MAKE_EDITS: PhraseSet("make_edits", ("Would you like to make",)),
    DialogKind.TOOL_CALL: PhraseSet("tool_call", ("Approve app tool call",)),
    DialogKind.TRUST_DIRECTORY: PhraseSet("trust_directory", ("Do you trust the contents",)),
    DialogKind.FULL_ACCESS: PhraseSet("full_access", ("Enable full access",)),
    DialogKind.NETWORK_ACCESS: PhraseSet("network_access", ("Allow Codex to",)),
}

APPROVAL_PHRASES = PhraseSet("approval", (
    "Yes, just this once",
    "Yes, continue",
    "Yes, and don't ask",
    "Run the tool and continue",
    "Apply full access",
    "Yes, and allow this host",
))

# "following command" / "following edits" belong to the question header and
# must not count as a second signal
CONTEXT_PHRASES = PhraseSet("context", (
    "No, and tell",
    "Decline this tool call",
    "Go back without",
    "Cancel this",
    "may have side effects",
    "may access external",
    "may modify",
    "untrusted",
    "prompt injection",
))

ELICITATION_REQUEST_PHRASES = PhraseSet("elicitation_request", (
    "provide the requested info",
    "requesting additional information",
))
ELICITATION_DECLINE_PHRASES = PhraseSet("elicitation_decline", (
    "continue without it",
    "Cancel this request",
))


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class MatchKind(enum.Enum):
    NO_MATCH = "no_match"
    DIALOG = "dialog"
    ELICITATION = "elicitation"


@dataclass(frozen=True)
class ClassificationResult:
    kind: MatchKind = MatchKind.NO_MATCH
    signals: FrozenSet[Signal] = frozenset()

    @property
    def pattern(self) -> str:
        """Token string written to the audit log, e.g. "question+approval"."""
        if self.kind is MatchKind.ELICITATION:
            return "elicitation"
        return "+".join(s.value for s in Signal if s in self.signals)

    def __bool__(self) -> bool:
        return self.kind is not MatchKind.NO_MATCH


NO_MATCH = ClassificationResult()
ELICITATION = ClassificationResult(kind=MatchKind.ELICITATION)


def dialog(signals: Iterable[Signal]) -> ClassificationResult:
    return ClassificationResult(kind=MatchKind.DIALOG, signals=frozenset(signals))


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

def question_kinds(text: str) -> FrozenSet[DialogKind]:
    """Return the dialog kinds whose question header appears in text."""
    return frozenset(k for k, phrases in QUESTION_PHRASES.items() if phrases.search(text))


def detect_prompt(snapshot: str) -> ClassificationResult:
    """Detect a permission dialog in the last DIALOG_WINDOW lines."""
    if not snapshot or not snapshot.strip():
        return NO_MATCH

    window = tail_lines(strip_ansi(snapshot), DIALOG_WINDOW)

    has_question = bool(question_kinds(window))
    has_approval_option = APPROVAL_PHRASES.search(window)
    has_context = CONTEXT_PHRASES.search(window)

    if has_question and (has_approval_option or has_context):
        signals = {Signal.QUESTION}
        if has_approval_option:
            signals.add(Signal.APPROVAL_OPTION)
        if has_context:
            signals.add(Signal.CONTEXT_OPTION)
        return dialog(signals)

    # The question header may have scrolled above the visible area
    if has_approval_option and has_context:
        return dialog({Signal.APPROVAL_OPTION, Signal.CONTEXT_OPTION})

    return NO_MATCH


def detect_elicitation(snapshot: str) -> ClassificationResult:
    """Detect an MCP information request in the last ELICITATION_WINDOW lines."""
    if not snapshot or not snapshot.strip():
        return NO_MATCH

    window = tail_lines(strip_ansi(snapshot), ELICITATION_WINDOW)
    if ELICITATION_REQUEST_PHRASES.search(window) and ELICITATION_DECLINE_PHRASES.search(window):
        return ELICITATION
    return NO_MATCH


def classify(snapshot: str) -> ClassificationResult:
    """Classify a pane snapshot. Dialog detection takes precedence."""
    result = detect_prompt(snapshot)
    if result:
        return result
    return detect_elicitation(snapshot)
