"""
Tests for the Textual widget, the demo app and the command line.

App tests run headless through App.run_test() and the Pilot.
Run with: pytest tests/test_app.py -v
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from typewriter_tui import SchedulerState, Surface, TextSurface, TypewriterOptions
from typewriter_tui.app import TypewriterApp, build_parser, main, script_from_texts
from typewriter_tui.constants import CARET
from typewriter_tui.script import Rewrite, Write
from typewriter_tui.widget import TextualClock, TypewriterText


def fast_options(**overrides) -> TypewriterOptions:
    return TypewriterOptions(delay=0, fluctuation=0).merged(**overrides)


class TestScriptFromTexts:

    def test_first_written_rest_rewritten(self):
        assert script_from_texts(["Hi", "Hello", "Hey"]) == [
            Write("Hi"),
            Rewrite(2, "Hello"),
            Rewrite(5, "Hey"),
        ]

    def test_no_texts(self):
        assert script_from_texts([]) == []


class TestTypewriterText:

    def test_surface_round_trip(self):
        widget = TypewriterText("abc")
        assert widget.get_text() == "abc"
        widget.set_text("abcd")
        assert widget.get_text() == "abcd"

    def test_render_appends_caret(self):
        widget = TypewriterText("hi")
        assert widget.render().plain == f"hi{CARET}"

    def test_render_without_caret(self):
        widget = TypewriterText("hi", caret=False)
        assert widget.render().plain == "hi"

    def test_blink_off_keeps_width(self):
        widget = TypewriterText("hi")
        widget._toggle_blink()
        assert widget.render().plain == "hi "


class TestTextualClock:
    """Frames and sleeps ride on the widget's own timers."""

    def test_request_frame_uses_widget_timer(self):
        widget = MagicMock()
        clock = TextualClock(widget, frame_interval_ms=20)
        seen = []
        clock.request_frame(seen.append)

        delay, callback = widget.set_timer.call_args.args
        assert delay == pytest.approx(0.02)
        assert widget.set_timer.call_args.kwargs["name"] == "typewriter-frame"

        callback()
        assert len(seen) == 1

    def test_set_and_cancel_timer(self):
        widget = MagicMock()
        clock = TextualClock(widget)
        fire = MagicMock()

        handle = clock.set_timer(1500, fire)
        assert handle is widget.set_timer.return_value
        assert widget.set_timer.call_args.args == (1.5, fire)

        clock.cancel_timer(handle)
        handle.stop.assert_called_once()

    def test_surfaces_satisfy_protocol(self):
        assert isinstance(TypewriterText(), Surface)
        assert isinstance(TextSurface(), Surface)


class TestTypewriterApp:
    """The app plays its script on the widget and maps keys to controls."""

    @pytest.mark.asyncio
    async def test_plays_script(self):
        app = TypewriterApp([Write("hi")], fast_options())
        async with app.run_test() as pilot:
            await app.typewriter.wait()
            widget = app.query_one("#typewriter", TypewriterText)
            assert widget.get_text() == "hi"
            assert app.typewriter.state is SchedulerState.IDLE

    @pytest.mark.asyncio
    async def test_stop_key_restores_text(self):
        app = TypewriterApp([Write("hi")], fast_options())
        async with app.run_test() as pilot:
            await app.typewriter.wait()
            await pilot.press("s")
            await pilot.pause(0.2)
            widget = app.query_one("#typewriter", TypewriterText)
            assert widget.get_text() == ""
            assert app.typewriter.state is SchedulerState.STOPPED

    @pytest.mark.asyncio
    async def test_space_toggles_pause(self):
        # The first character is immediate, the second is a second away
        app = TypewriterApp([Write("abc")], fast_options(delay=1000))
        async with app.run_test() as pilot:
            await pilot.pause(0.1)
            await pilot.press("space")
            await pilot.pause(0.2)
            assert app.typewriter.state is SchedulerState.PAUSED
            assert app.query_one("#typewriter", TypewriterText).get_text() == "a"

            await pilot.press("space")
            assert app.typewriter.state is SchedulerState.RUNNING

    @pytest.mark.asyncio
    async def test_restart_key(self):
        app = TypewriterApp([Write("hi")], fast_options())
        async with app.run_test() as pilot:
            await app.typewriter.wait()
            await pilot.press("r")
            assert app.typewriter.state is SchedulerState.RUNNING
            await app.typewriter.wait()
            assert app.query_one("#typewriter", TypewriterText).get_text() == "hihi"

    @pytest.mark.asyncio
    async def test_exit_when_done(self):
        app = TypewriterApp([Write("hi")], fast_options(), exit_when_done=True)
        async with app.run_test():
            await app.typewriter.wait()
            await app.workers.wait_for_complete()
        assert app.return_code == 0


class TestCommandLine:

    def test_parser_defaults_leave_options_alone(self):
        args = build_parser().parse_args(["Hello"])
        assert args.texts == ["Hello"]
        assert args.repeat is None
        assert args.debug is None
        assert args.delay is None

    def test_parser_options(self):
        args = build_parser().parse_args(
            ["--repeat", "--delay", "20", "--sleep-before-repeat", "800", "a", "b"]
        )
        assert args.repeat is True
        assert args.delay == 20
        assert args.sleep_before_repeat == 800
        assert args.texts == ["a", "b"]

    def test_missing_script_file(self, tmp_path, capsys):
        assert main(["--script", str(tmp_path / "missing.json")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_script_file(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text('[{"action": "dance"}]')
        assert main(["--script", str(path)]) == 1
        assert "dance" in capsys.readouterr().err

    def test_no_input_is_a_usage_error(self):
        with pytest.raises(SystemExit):
            main([])
