"""Script format for defining typewriter effects as data.

Each step is a dataclass describing one builder call. Scripts can be written
in Python or loaded from a JSON file.

Example script:
    SCRIPT = [
        Write("Hobbest"),
        Sleep(1500),
        Rewrite(3, "ies, Interests & Activities", sleep=3500),
        Delete(31),
    ]

The same script as JSON:
    [
        {"action": "write", "text": "Hobbest"},
        {"action": "sleep", "ms": 1500},
        {"action": "rewrite", "count": 3, "text": "ies, Interests & Activities", "sleep": 3500},
        {"action": "delete", "count": 31}
    ]
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING

from .config import TypewriterOptions
from .errors import ConfigurationError

if TYPE_CHECKING:
    from .scheduler import Typewriter


@dataclass
class ScriptStep:
    """Base class for all script steps.

    options holds call-site overrides (delay, fluctuation, sleep, ...).
    """
    options: dict = field(default_factory=dict, kw_only=True)


@dataclass
class Write(ScriptStep):
    """Type text character by character."""
    text: str


@dataclass
class Rewrite(ScriptStep):
    """Backspace `count` characters, then type text."""
    count: int
    text: str


@dataclass
class Backspace(ScriptStep):
    """Erase `count` characters one at a time."""
    count: int


@dataclass
class Delete(ScriptStep):
    """Erase `count` characters at once."""
    count: int


@dataclass
class Sleep(ScriptStep):
    """Wait, in milliseconds."""
    ms: float


STEP_TYPES = {
    "write": Write,
    "rewrite": Rewrite,
    "backspace": Backspace,
    "delete": Delete,
    "sleep": Sleep,
}


def build_typewriter(typewriter: "Typewriter", script: list[ScriptStep]) -> "Typewriter":
    """Apply every step of a script to a typewriter's builder."""
    for step in script:
        if isinstance(step, Write):
            typewriter.write(step.text, **step.options)
        elif isinstance(step, Rewrite):
            typewriter.rewrite(step.count, step.text, **step.options)
        elif isinstance(step, Backspace):
            typewriter.backspace(step.count, **step.options)
        elif isinstance(step, Delete):
            typewriter.delete(step.count, **step.options)
        elif isinstance(step, Sleep):
            typewriter.sleep(step.ms)
        else:
            raise ConfigurationError(f"Unknown script step: {step!r}")
    return typewriter


def parse_script(entries: list) -> list[ScriptStep]:
    """Turn a list of {"action": ..., ...} dicts into script steps.

    Keys that are not fields of the step are treated as options.
    """
    if not isinstance(entries, list):
        raise ConfigurationError("A script must be a list of steps")

    script: list[ScriptStep] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or "action" not in entry:
            raise ConfigurationError(f"Script step {i} needs an 'action'")

        entry = dict(entry)
        name = entry.pop("action")
        step_type = STEP_TYPES.get(name)
        if step_type is None:
            raise ConfigurationError(f"Script step {i}: unknown action {name!r}")

        arg_names = {f.name for f in fields(step_type)} - {"options"}
        args = {k: entry.pop(k) for k in list(entry) if k in arg_names}
        missing = arg_names - set(args)
        if missing:
            raise ConfigurationError(
                f"Script step {i} ({name}) is missing {', '.join(sorted(missing))}"
            )
        # Fail early on typos, the builder would reject them at build time anyway
        TypewriterOptions().merged(**entry)
        script.append(step_type(**args, options=entry))
    return script


def load_script(path: Path | str) -> list[ScriptStep]:
    """Load a JSON script file."""
    path = Path(path)
    try:
        entries = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path}: not valid JSON ({e})") from e
    return parse_script(entries)


def script_duration(script: list[ScriptStep], options: TypewriterOptions | None = None) -> float:
    """Nominal (jitter-free) duration of a script in milliseconds.

    One tick per character at `delay`, the first one immediate. Frame
    spacing between steps is not counted.
    """
    base = options or TypewriterOptions()
    total = 0.0
    for step in script:
        opts = base.merged(**step.options)
        if isinstance(step, Write):
            total += max(len(step.text) - 1, 0) * opts.delay + opts.sleep
        elif isinstance(step, Rewrite):
            total += max(step.count - 1, 0) * opts.delay + opts.sleep_rewrite
            total += max(len(step.text) - 1, 0) * opts.delay + opts.sleep
        elif isinstance(step, Backspace):
            total += max(step.count - 1, 0) * opts.delay + opts.sleep
        elif isinstance(step, Delete):
            total += opts.sleep
        elif isinstance(step, Sleep):
            total += step.ms
    return total
