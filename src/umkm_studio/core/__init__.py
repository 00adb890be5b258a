"""Core functionality for poster generation and payment.

- **config**: Configuration management using Pydantic Settings (UMKM_ prefix)
- **models**: Generation requests, generated content, image blobs
- **workflow**: Immutable workflow state and its reducer
- **controller**: GenerationController, the session's request sequencer
- **genai**: Gemini text and image collaborator
- **payment**: Gateway client, tagged token results, payment widget bridge
"""

from .config import StudioConfig, config
from .controller import GenerationController
from .errors import (
    CollaboratorError,
    ContentFormatError,
    GatewayConfigurationError,
    GatewayUpstreamError,
)
from .models import (
    ContentType,
    DisplayStyle,
    GeneratedContent,
    GenerationRequest,
    ImageBlob,
    PaymentSession,
)
from .payment import MOCK_TOKEN, GatewayClient, MockToken, RealToken, TokenError
from .workflow import PaymentPhase, Phase, WorkflowState

__all__ = [
    "StudioConfig",
    "config",
    "GenerationController",
    "CollaboratorError",
    "ContentFormatError",
    "GatewayConfigurationError",
    "GatewayUpstreamError",
    "ContentType",
    "DisplayStyle",
    "GeneratedContent",
    "GenerationRequest",
    "ImageBlob",
    "PaymentSession",
    "MOCK_TOKEN",
    "GatewayClient",
    "MockToken",
    "RealToken",
    "TokenError",
    "PaymentPhase",
    "Phase",
    "WorkflowState",
]
