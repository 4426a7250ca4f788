"""Unit tests for the Renderer: bar math, spinner cycle, and line output."""

from __future__ import annotations

import io

import pytest
from rich.text import Text

from cliprogress.config.settings import ProgressSettings
from cliprogress.core.renderer import Renderer, clamp_ratio, round_half_up
from tests.fixtures import ERASE, make_console


@pytest.fixture
def renderer(output, error_output) -> Renderer:
    return Renderer(
        ProgressSettings(),
        console=make_console(output),
        error_console=make_console(error_output),
    )


class TestBarMath:
    """Tests for clamping and segment counts."""

    @pytest.mark.parametrize(
        "ratio", [-5.0, -0.01, 0.0, 0.02, 0.33, 0.5, 0.979, 1.0, 1.5, 40.0]
    )
    def test_segments_always_fill_the_bar(self, renderer, ratio):
        """Filled stays within the bar and filled + empty equals its width."""
        filled, empty = renderer.bar_segments(ratio)

        assert 0 <= filled <= renderer.settings.bar_width
        assert filled + empty == renderer.settings.bar_width

    def test_out_of_range_ratios_clamp(self, renderer):
        assert renderer.bar_segments(-1.0) == (0, 24)
        assert renderer.bar_segments(3.0) == (24, 0)

    def test_half_rounds_up(self):
        """A bar of 4 at 12.5% is exactly half a glyph and rounds up."""
        settings = ProgressSettings(bar_width=4)
        renderer = Renderer(settings, console=make_console(io.StringIO()))

        assert renderer.bar_segments(0.125) == (1, 3)
        assert round_half_up(2.5) == 3
        assert round_half_up(0.49) == 0

    def test_clamp_ratio(self):
        assert clamp_ratio(-0.2) == 0.0
        assert clamp_ratio(0.4) == 0.4
        assert clamp_ratio(1.2) == 1.0

    def test_render_bar_glyphs(self, renderer):
        bar = renderer.render_bar(0.5)

        assert isinstance(bar, Text)
        assert bar.plain == "━" * 12 + "─" * 12


class TestPaint:
    """Tests for animated frames."""

    def test_paint_overwrites_current_line(self, renderer, output):
        renderer.paint("Building", 0.5)

        expected = ERASE + "    ⠋ Building  " + "━" * 12 + "─" * 12 + "  50%"
        assert output.getvalue() == expected

    def test_paint_never_appends_newline(self, renderer, output):
        renderer.paint("a", 0.1)
        renderer.paint("a", 0.2)

        assert "\n" not in output.getvalue()
        assert output.getvalue().count(ERASE) == 2

    def test_percent_uses_stored_ratio(self, renderer, output):
        """The bar clamps but the percentage reports the raw ratio."""
        renderer.paint("Over", 1.5)

        assert output.getvalue().endswith("━" * 24 + "  150%")

    def test_label_is_plain_text(self, renderer, output):
        renderer.paint("[bold]literal[/bold]", 0)

        assert "[bold]literal[/bold]" in output.getvalue()

    def test_rich_text_label(self, renderer, output):
        renderer.paint(Text("styled", style="bold"), 0)

        assert " styled  " in output.getvalue()


class TestSpinner:
    """Tests for the shared spinner cycle."""

    def test_frame_advances_once_per_paint(self, renderer, output):
        frames = renderer.settings.spinner_frames
        renderer.paint("x", 0)
        renderer.paint("x", 0)
        renderer.paint("y", 0)

        painted = output.getvalue().split(ERASE)[1:]
        assert [line[4] for line in painted] == list(frames[:3])
        assert renderer.frame_index == 3

    def test_frame_wraps_modulo_count(self, output):
        renderer = Renderer(
            ProgressSettings(spinner_frames=("a", "b"), indent=0),
            console=make_console(output),
        )
        for _ in range(5):
            renderer.paint("x", 0)

        painted = output.getvalue().split(ERASE)[1:]
        assert [line[0] for line in painted] == ["a", "b", "a", "b", "a"]

    def test_renderers_do_not_share_frames(self):
        first = Renderer(ProgressSettings(), console=make_console(io.StringIO()))
        second = Renderer(ProgressSettings(), console=make_console(io.StringIO()))

        first.paint("x", 0)
        first.paint("x", 0)

        assert first.frame_index == 2
        assert second.frame_index == 0


class TestStates:
    """Tests for one-shot status lines."""

    def test_succeed_erases_then_prints_line(self, renderer, output):
        renderer.succeed("Done")

        assert output.getvalue() == ERASE + "    ✓ Done\n"

    def test_fail_erases_then_prints_line(self, renderer, output):
        renderer.fail("Broken")

        assert output.getvalue() == ERASE + "    ✖ Broken\n"

    def test_info_and_warn_do_not_erase(self, renderer, output):
        renderer.info("Skipped")
        renderer.warn("Careful")

        assert output.getvalue() == "    ○ Skipped\n    ⚠ Careful\n"

    def test_states_do_not_advance_spinner(self, renderer):
        renderer.succeed("a")
        renderer.warn("b")

        assert renderer.frame_index == 0

    def test_error_block_goes_to_error_console(self, renderer, output, error_output):
        renderer.error_block("disk full")

        assert output.getvalue() == ""
        assert "\ndisk full\n" in error_output.getvalue()
