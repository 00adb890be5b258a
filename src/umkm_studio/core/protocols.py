"""Narrow interfaces the controller uses to reach its collaborators.

Each protocol is satisfied by a concrete class in this package
(:class:`~umkm_studio.core.genai.GeminiContentService`,
:class:`~umkm_studio.core.payment.GatewayClient`) and by simple fakes in
the tests.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol

from .models import GeneratedContent, GenerationRequest, ImageBlob
from .payment import TokenResult


class TextGenerator(Protocol):
    async def generate_content(self, request: GenerationRequest) -> GeneratedContent: ...


class ImageGenerator(Protocol):
    async def generate_visual(self, prompt: str, source_image: ImageBlob | None) -> ImageBlob: ...


class SessionIssuer(Protocol):
    async def create_session(self, product_label: str, amount: int) -> TokenResult: ...


# Simulated-checkout confirmation: receives the dialog text, returns the answer.
ConfirmCallback = Callable[[str], Awaitable[bool]]
