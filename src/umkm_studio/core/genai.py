"""Google Gemini collaborator for marketing text and poster images.

:class:`GeminiContentService` is the only place that talks to the
generative-AI API.  It implements both halves of the collaborator contract
the controller depends on:

- **Text** - the structured request (form fields + product photo + optional
  logo) goes to the text model with the fixed system instruction and a JSON
  response schema.  The reply must be a JSON object with string fields
  ``image_prompt``, ``caption`` and ``hashtags``.
- **Image** - a free-text prompt plus an optional reference photo goes to
  the image model with a fixed 3:4 aspect ratio.  The first inline image
  part of the reply is returned.

The SDK client is created lazily so the service can be constructed (and the
UI started) without an API key; the key is checked on first use.

Usage
-----
::

    from umkm_studio.core.config import config
    from umkm_studio.core.genai import GeminiContentService

    service = GeminiContentService.from_config(config)
    content = await service.generate_content(request)
    poster = await service.generate_visual(content.image_prompt, request.product_image)
"""

from __future__ import annotations

import logging

from google import genai
from google.genai import types

from .config import StudioConfig
from .errors import CollaboratorError
from .models import GeneratedContent, GenerationRequest, ImageBlob
from .prompt_builder import SYSTEM_INSTRUCTION, build_request_prompt

logger = logging.getLogger(__name__)

# JSON schema the text model must follow.
_CONTENT_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "image_prompt": types.Schema(type=types.Type.STRING),
        "caption": types.Schema(type=types.Type.STRING),
        "hashtags": types.Schema(type=types.Type.STRING),
    },
    required=list(GeneratedContent.REQUIRED_FIELDS),
)


def _image_part(image: ImageBlob) -> types.Part:
    return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)


class GeminiContentService:
    """Text and image generation backed by the Gemini API.

    Attributes:
        text_model_id: Model used for structured marketing content.
        image_model_id: Model used for poster images.
        aspect_ratio: Aspect ratio requested for every poster.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        text_model_id: str = "gemini-2.5-flash",
        image_model_id: str = "gemini-2.5-flash-image",
        aspect_ratio: str = "3:4",
        client: genai.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._client = client
        self.text_model_id = text_model_id
        self.image_model_id = image_model_id
        self.aspect_ratio = aspect_ratio

    @classmethod
    def from_config(cls, config: StudioConfig) -> GeminiContentService:
        return cls(
            config.gemini_api_key,
            text_model_id=config.text_model_id,
            image_model_id=config.image_model_id,
            aspect_ratio=config.image_aspect_ratio,
        )

    def _get_client(self) -> genai.Client:
        """Return the SDK client, creating it on first use.

        Raises:
            CollaboratorError: If no client was injected and no API key is set.
        """
        if self._client is None:
            if not self._api_key:
                raise CollaboratorError("API Key is missing. Please set it in the environment.")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate_content(self, request: GenerationRequest) -> GeneratedContent:
        """Generate the image prompt, caption and hashtags for a request.

        Args:
            request: Submitted form data, including the product photo.

        Returns:
            Parsed :class:`GeneratedContent`.

        Raises:
            CollaboratorError: Missing API key.
            ContentFormatError: Empty, non-JSON, or incomplete reply.
        """
        client = self._get_client()

        parts = [types.Part.from_text(text=build_request_prompt(request))]
        if request.product_image:
            parts.append(_image_part(request.product_image))
        if request.logo_image:
            parts.append(_image_part(request.logo_image))

        logger.info(
            f"Requesting marketing content for '{request.product_name}' "
            f"({len(parts) - 1} image part(s)) from {self.text_model_id}"
        )
        response = await client.aio.models.generate_content(
            model=self.text_model_id,
            contents=types.Content(role="user", parts=parts),
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                response_mime_type="application/json",
                response_schema=_CONTENT_SCHEMA,
            ),
        )

        return GeneratedContent.from_json(response.text)

    async def generate_visual(self, prompt: str, source_image: ImageBlob | None) -> ImageBlob:
        """Generate the poster image.

        Args:
            prompt: Image prompt, usually ``GeneratedContent.image_prompt``.
            source_image: Optional reference photo of the product.

        Returns:
            The first inline image in the reply.

        Raises:
            CollaboratorError: Missing API key, or no image data in the reply.
        """
        client = self._get_client()

        parts = [types.Part.from_text(text=prompt)]
        if source_image:
            parts.append(_image_part(source_image))

        logger.info(f"Requesting {self.aspect_ratio} poster from {self.image_model_id}")
        response = await client.aio.models.generate_content(
            model=self.image_model_id,
            contents=types.Content(role="user", parts=parts),
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=self.aspect_ratio),
            ),
        )

        image = _extract_inline_image(response)
        if image is None:
            raise CollaboratorError("Failed to generate image visual.")
        return image


def _extract_inline_image(response) -> ImageBlob | None:
    """Return the first inline image part of a response, or ``None``."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return ImageBlob(data=inline.data, mime_type=inline.mime_type or "image/png")
    return None
