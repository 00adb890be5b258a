"""Unit tests for the Gradio event handlers.

Controllers are wired to fake collaborators; the confirmation gate is
answered the way the Confirm/Cancel buttons would answer it.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from umkm_studio.core.models import ImageBlob
from umkm_studio.core.workflow import Phase
from umkm_studio.ui.handlers import (
    confirm_payment,
    decline_payment,
    download_poster,
    edit_generated_content,
    generate_poster_image,
    generate_poster_text,
)
from umkm_studio.ui.models import ConfirmationGate, UIState

pytestmark = pytest.mark.anyio


@pytest.fixture
def make_state(make_controller):
    def _make(**kwargs) -> UIState:
        gate = ConfirmationGate()
        return UIState(controller=make_controller(confirm=gate.ask, **kwargs), gate=gate)

    return _make


@pytest.fixture
def form(temp_dir, png_bytes):
    path = temp_dir / "kopi.png"
    path.write_bytes(png_bytes)
    return [
        str(path),
        "Kopi Susu",
        "Kopi susu gula aren.",
        "",
        "minimal and bright",
        "showcase",
        "Rp15.000",
        "",
        "Halal",
        "",
        "",
        None,
    ]


async def _drive(generator, state: UIState, confirm: bool) -> list[tuple]:
    """Collect handler outputs, answering the dialog whenever it is shown."""
    outputs = []
    async for output in generator:
        outputs.append(output)
        if output[2].get("visible"):
            (confirm_payment if confirm else decline_payment)(state)
    return outputs


class TestGeneratePosterText:
    async def test_generates_content(self, make_state, form, kopi_content):
        state = make_state()

        status, caption, hashtags, image_prompt, poster, new_state = await generate_poster_text(
            *form, state
        )

        assert "Caption ready" in status
        assert caption == kopi_content.caption
        assert hashtags == kopi_content.hashtags
        assert image_prompt == kopi_content.image_prompt
        assert poster is None
        assert new_state is state

    async def test_validation_error(self, make_state, form, text_generator):
        state = make_state()
        form[1] = ""

        status, *_ = await generate_poster_text(*form, state)

        assert status.startswith("❌ **Validation Error**")
        text_generator.generate_content.assert_not_awaited()

    async def test_collaborator_error(self, make_state, form, text_generator):
        text_generator.generate_content.side_effect = RuntimeError("API Key is missing.")
        state = make_state()

        status, caption, *_ = await generate_poster_text(*form, state)

        assert "API Key is missing." in status
        assert caption == ""


class TestEditGeneratedContent:
    async def test_edit_stored(self, make_state, form):
        state = make_state()
        await generate_poster_text(*form, state)

        edit_generated_content("Caption baru", "#baru", "new prompt", state)

        content = state.controller.state.generated_content
        assert (content.caption, content.hashtags, content.image_prompt) == (
            "Caption baru",
            "#baru",
            "new prompt",
        )

    def test_edit_before_generation(self, make_state):
        state = make_state()
        status, new_state = edit_generated_content("x", "y", "z", state)
        assert new_state.controller.state.generated_content is None


class TestGeneratePosterImage:
    """The pay-then-generate handler."""

    async def test_confirmed_payment_generates_poster(self, make_state, form):
        state = make_state()
        await generate_poster_text(*form, state)

        outputs = await _drive(generate_poster_image(state), state, confirm=True)

        assert "MIDTRANS PAYMENT SIMULATOR" in outputs[0][3]["value"]
        status, poster, group, message, _ = outputs[-1]
        assert isinstance(poster, Image.Image)
        assert group["visible"] is False
        assert "Poster ready" in status
        assert state.controller.state.has_paid_for_current_artifact

    async def test_declined_payment(self, make_state, form, image_generator):
        state = make_state()
        await generate_poster_text(*form, state)

        outputs = await _drive(generate_poster_image(state), state, confirm=False)

        assert outputs[-1][1] is None
        assert state.controller.state.phase is Phase.TEXT_READY
        image_generator.generate_visual.assert_not_awaited()

    async def test_without_text(self, make_state):
        state = make_state()

        outputs = await _drive(generate_poster_image(state), state, confirm=True)

        assert len(outputs) == 1
        assert "regenerate text first" in outputs[0][0]


class TestDownloadPoster:
    async def test_download_after_payment(self, make_state, form, test_config, png_bytes):
        state = make_state(paywall_step="download")
        await generate_poster_text(*form, state)
        await _drive(generate_poster_image(state), state, confirm=True)

        with patch("umkm_studio.ui.handlers.payment.config", test_config):
            outputs = await _drive(download_poster(state), state, confirm=True)

        file_update = outputs[-1][1]
        path = Path(file_update["value"])
        assert file_update["visible"] is True
        assert path.parent == test_config.download_dir
        assert path.name.startswith("poster-Kopi_Susu-")
        assert path.suffix == ".png"
        assert path.read_bytes() == png_bytes
        assert state.last_download == str(path)

    async def test_sessions_with_same_product_get_own_files(
        self, make_controller, image_generator, form, test_config
    ):
        posters = {"red": ImageBlob(data=b"red poster"), "blue": ImageBlob(data=b"blue poster")}
        states = {}
        for colour, poster in posters.items():
            gate = ConfirmationGate()
            image_generator.generate_visual.return_value = poster
            state = UIState(
                controller=make_controller(confirm=gate.ask, paywall_step="download"), gate=gate
            )
            await generate_poster_text(*form, state)
            await _drive(generate_poster_image(state), state, confirm=True)
            states[colour] = state

        paths = {}
        with patch("umkm_studio.ui.handlers.payment.config", test_config):
            for colour, state in states.items():
                outputs = await _drive(download_poster(state), state, confirm=True)
                paths[colour] = Path(outputs[-1][1]["value"])

        assert paths["red"] != paths["blue"]
        assert paths["red"].read_bytes() == b"red poster"
        assert paths["blue"].read_bytes() == b"blue poster"

    async def test_repeat_download_replaces_file(self, make_state, form, test_config):
        state = make_state(paywall_step="download")
        await generate_poster_text(*form, state)
        await _drive(generate_poster_image(state), state, confirm=True)

        with patch("umkm_studio.ui.handlers.payment.config", test_config):
            first = await _drive(download_poster(state), state, confirm=True)
            second = await _drive(download_poster(state), state, confirm=True)

        first_path = Path(first[-1][1]["value"])
        second_path = Path(second[-1][1]["value"])
        assert not first_path.exists()
        assert second_path.exists()
        assert list(test_config.download_dir.iterdir()) == [second_path]

    async def test_download_clears_previous_error(self, make_state, form, test_config):
        state = make_state()
        await generate_poster_text(*form, state)
        await _drive(generate_poster_image(state), state, confirm=True)
        state.controller.edit_content(title="x")
        assert state.controller.state.last_error

        with patch("umkm_studio.ui.handlers.payment.config", test_config):
            outputs = await _drive(download_poster(state), state, confirm=True)

        assert "Error" not in outputs[-1][0]
        assert state.controller.state.last_error is None

    async def test_download_declined(self, make_state, form, test_config):
        state = make_state(paywall_step="download")
        await generate_poster_text(*form, state)
        await _drive(generate_poster_image(state), state, confirm=True)

        with patch("umkm_studio.ui.handlers.payment.config", test_config):
            outputs = await _drive(download_poster(state), state, confirm=False)

        assert outputs[-1][1]["visible"] is False
        assert state.last_download is None

    async def test_download_without_poster(self, make_state):
        state = make_state()

        outputs = await _drive(download_poster(state), state, confirm=True)

        assert "No generated image to download." in outputs[-1][0]
