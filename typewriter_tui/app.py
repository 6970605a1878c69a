#!/usr/bin/env python3
"""
Typewriter - Textual Demo Application

Plays a typewriter script full screen.

Keyboard controls:
- Space: Pause / resume
- R: Restart from the first step
- S: Stop and restore the original text
- Q: Quit

Run:
    python -m typewriter_tui "Hello" "Hello, World!" --repeat
    python -m typewriter_tui --script demos/hobbies.json --debug --log typewriter.log
"""

import argparse
import logging
import random
import sys

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Center, Middle
from textual.widgets import Footer

from .config import TypewriterOptions, resolve_options
from .errors import ConfigurationError
from .scheduler import SchedulerState, Typewriter
from .script import Rewrite, ScriptStep, Write, build_typewriter, load_script
from .widget import TextualClock, TypewriterText

logger = logging.getLogger(__name__)


class TypewriterApp(App):
    """Shows one TypewriterText and plays a script on it."""

    CSS = """
    Screen {
        align: center middle;
    }

    #typewriter {
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("space", "toggle_pause", "Pause/Resume"),
        Binding("r", "restart", "Restart"),
        Binding("s", "stop", "Stop"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        script: list[ScriptStep],
        options: TypewriterOptions | None = None,
        exit_when_done: bool = False,
        rng: random.Random | None = None,
    ):
        super().__init__()
        self._script = script
        self._options = options
        self._exit_when_done = exit_when_done
        self._rng = rng
        self.typewriter: Typewriter | None = None

    def compose(self) -> ComposeResult:
        with Center():
            with Middle():
                yield TypewriterText(id="typewriter")
        yield Footer()

    def on_mount(self) -> None:
        """Build the typewriter on the mounted widget and start it."""
        widget = self.query_one("#typewriter", TypewriterText)
        self.typewriter = Typewriter(
            widget,
            self._options,
            clock=TextualClock(widget),
            rng=self._rng,
        )
        logger.info(f"Playing {len(self._script)} script steps")
        build_typewriter(self.typewriter, self._script).start()
        if self._exit_when_done:
            self.run_worker(self._exit_when_finished(), exclusive=True)

    async def _exit_when_finished(self) -> None:
        await self.typewriter.wait()
        self.exit()

    def action_toggle_pause(self) -> None:
        if self.typewriter.state is SchedulerState.PAUSED:
            self.typewriter.resume()
        else:
            self.typewriter.pause()

    def action_restart(self) -> None:
        self.typewriter.restart()

    def action_stop(self) -> None:
        self.typewriter.stop()


def script_from_texts(texts: list[str]) -> list[ScriptStep]:
    """Type the first text, then rewrite it into each following one."""
    script: list[ScriptStep] = []
    previous = None
    for text in texts:
        if previous is None:
            script.append(Write(text))
        else:
            script.append(Rewrite(len(previous), text))
        previous = text
    return script


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typewriter",
        description="Play a typewriter text effect in the terminal.",
    )
    parser.add_argument("texts", nargs="*", help="Texts to type, each one replacing the previous")
    parser.add_argument("--script", metavar="FILE", help="JSON script file (see typewriter_tui.script)")
    parser.add_argument("--repeat", action="store_true", default=None, help="Loop forever")
    parser.add_argument("--delay", type=float, help="Milliseconds between characters")
    parser.add_argument("--fluctuation", type=float, help="Random +/- milliseconds on each delay")
    parser.add_argument("--sleep", type=float, help="Milliseconds to pause after each text")
    parser.add_argument("--sleep-rewrite", type=float, help="Milliseconds between erasing and retyping")
    parser.add_argument("--sleep-before-repeat", type=float, help="Milliseconds to pause before looping")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible jitter")
    parser.add_argument("--debug", action="store_true", default=None, help="Log every step")
    parser.add_argument("--log", metavar="FILE", help="Write log messages to FILE instead of stderr")
    parser.add_argument("--exit-when-done", action="store_true", help="Quit when the script ends")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the typewriter command"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Textual owns the terminal, so debug output is best sent to --log
    logging.basicConfig(
        filename=args.log,
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        if args.script:
            script = load_script(args.script)
        elif args.texts:
            script = script_from_texts(args.texts)
        else:
            parser.error("give some texts or --script FILE")
        options = resolve_options(
            debug=args.debug,
            repeat=args.repeat,
            delay=args.delay,
            fluctuation=args.fluctuation,
            sleep=args.sleep,
            sleep_rewrite=args.sleep_rewrite,
            sleep_before_repeat=args.sleep_before_repeat,
        )
    except (ConfigurationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rng = random.Random(args.seed) if args.seed is not None else None
    app = TypewriterApp(script, options, exit_when_done=args.exit_when_done, rng=rng)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
