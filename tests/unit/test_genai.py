"""Unit tests for GeminiContentService with a mocked SDK client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from umkm_studio.core.errors import CollaboratorError, ContentFormatError
from umkm_studio.core.genai import GeminiContentService
from umkm_studio.core.models import GenerationRequest, ImageBlob
from umkm_studio.core.prompt_builder import SYSTEM_INSTRUCTION

pytestmark = pytest.mark.anyio


def _mock_client(response) -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=response)
    return client


def _image_response(data: bytes | None, mime_type: str = "image/png"):
    parts = [SimpleNamespace(text="Here is your poster", inline_data=None)]
    if data is not None:
        parts.append(SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type)))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class TestGenerateContent:
    """Tests for the text half of the collaborator."""

    async def test_parses_reply(self, kopi_request):
        client = _mock_client(
            SimpleNamespace(text='{"image_prompt": "p", "caption": "c", "hashtags": "#h"}')
        )
        service = GeminiContentService("key", client=client)

        content = await service.generate_content(kopi_request)

        assert content.caption == "c"
        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["config"].system_instruction == SYSTEM_INSTRUCTION
        assert kwargs["config"].response_mime_type == "application/json"

    async def test_sends_text_and_images(self, kopi_request, product_image):
        client = _mock_client(
            SimpleNamespace(text='{"image_prompt": "p", "caption": "c", "hashtags": "#h"}')
        )
        service = GeminiContentService("key", client=client)
        logo = ImageBlob(data=b"logo", mime_type="image/jpeg")
        request = GenerationRequest(
            product_name="Kopi Susu", product_image=product_image, logo_image=logo
        )

        await service.generate_content(request)

        parts = client.aio.models.generate_content.await_args.kwargs["contents"].parts
        assert 'product_name: "Kopi Susu"' in parts[0].text
        assert parts[1].inline_data.data == product_image.data
        assert parts[2].inline_data.mime_type == "image/jpeg"

    async def test_incomplete_reply(self, kopi_request):
        client = _mock_client(SimpleNamespace(text='{"caption": "c"}'))
        service = GeminiContentService("key", client=client)

        with pytest.raises(ContentFormatError):
            await service.generate_content(kopi_request)

    async def test_empty_reply(self, kopi_request):
        service = GeminiContentService("key", client=_mock_client(SimpleNamespace(text=None)))

        with pytest.raises(ContentFormatError, match="No response"):
            await service.generate_content(kopi_request)

    async def test_missing_api_key(self, kopi_request):
        service = GeminiContentService(None)

        with pytest.raises(CollaboratorError, match="API Key is missing"):
            await service.generate_content(kopi_request)


class TestGenerateVisual:
    """Tests for the image half of the collaborator."""

    async def test_returns_first_inline_image(self, product_image):
        client = _mock_client(_image_response(b"poster", "image/jpeg"))
        service = GeminiContentService("key", client=client, aspect_ratio="3:4")

        image = await service.generate_visual("a poster", product_image)

        assert image == ImageBlob(data=b"poster", mime_type="image/jpeg")
        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash-image"
        assert kwargs["config"].image_config.aspect_ratio == "3:4"
        assert len(kwargs["contents"].parts) == 2

    async def test_without_source_image(self):
        client = _mock_client(_image_response(b"poster"))
        service = GeminiContentService("key", client=client)

        await service.generate_visual("a poster", None)

        assert len(client.aio.models.generate_content.await_args.kwargs["contents"].parts) == 1

    @pytest.mark.parametrize(
        "response",
        [
            _image_response(None),
            SimpleNamespace(candidates=[]),
            SimpleNamespace(candidates=None),
        ],
    )
    async def test_no_image_in_reply(self, response):
        service = GeminiContentService("key", client=_mock_client(response))

        with pytest.raises(CollaboratorError, match="Failed to generate image visual"):
            await service.generate_visual("a poster", None)


class TestClientCreation:
    def test_client_created_lazily(self, test_config):
        with patch("umkm_studio.core.genai.genai.Client") as MockClient:
            service = GeminiContentService.from_config(test_config)
            MockClient.assert_not_called()

            service._get_client()
            service._get_client()

        MockClient.assert_called_once_with(api_key="test-key")
