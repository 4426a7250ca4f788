"""Unit tests for AnimatedHandle."""

import asyncio

import pytest

from cliprogress.config.settings import ProgressSettings
from cliprogress.core.handle import AnimatedHandle
from cliprogress.core.renderer import Renderer
from tests.fixtures import ERASE, make_console


@pytest.fixture
def renderer(output) -> Renderer:
    return Renderer(ProgressSettings(), console=make_console(output))


def frames_in(output) -> int:
    return output.getvalue().count(ERASE)


class TestAnimatedHandle:
    """Tests for the repaint loop and ratio storage."""

    @pytest.mark.asyncio
    async def test_paints_immediately(self, renderer, output):
        """The first frame is on screen before any timer fires."""
        handle = AnimatedHandle(renderer, "Loading", 0.25, interval=10)
        try:
            assert frames_in(output) == 1
            assert output.getvalue().endswith("25%")
        finally:
            handle.stop()

    @pytest.mark.asyncio
    async def test_repaints_on_interval(self, renderer, output):
        handle = AnimatedHandle(renderer, "Loading", interval=0.005)
        await asyncio.sleep(0.06)
        handle.stop()

        assert frames_in(output) >= 3

    @pytest.mark.asyncio
    async def test_repaint_uses_latest_ratio(self, renderer, output):
        handle = AnimatedHandle(renderer, "Loading", interval=0.005)
        handle.set_ratio(0.75)
        await asyncio.sleep(0.03)
        handle.stop()

        assert output.getvalue().endswith("75%")

    @pytest.mark.asyncio
    async def test_set_ratio_is_stored_verbatim(self, renderer):
        """Out-of-range values are kept; only painting clamps."""
        handle = AnimatedHandle(renderer, "x", interval=10)
        handle.set_ratio(1.7)
        assert handle.get_ratio() == 1.7
        handle.set_ratio(-0.3)
        assert handle.get_ratio() == -0.3
        handle.stop()

    @pytest.mark.asyncio
    async def test_stop_halts_painting(self, renderer, output):
        handle = AnimatedHandle(renderer, "x", interval=0.005)
        await asyncio.sleep(0.02)
        handle.stop()
        painted = frames_in(output)

        await asyncio.sleep(0.03)

        assert handle.stopped
        assert frames_in(output) == painted

    @pytest.mark.asyncio
    async def test_stop_twice_is_harmless(self, renderer):
        handle = AnimatedHandle(renderer, "x", interval=0.005)
        handle.stop()
        handle.stop()

        assert handle.stopped

    def test_requires_running_loop(self, renderer, output):
        """Nothing is painted when there is no loop to own the timer."""
        with pytest.raises(RuntimeError):
            AnimatedHandle(renderer, "x", interval=0.01)

        assert output.getvalue() == ""
