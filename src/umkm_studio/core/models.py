"""Domain models for poster generation requests and results."""

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum

from .errors import ContentFormatError

logger = logging.getLogger(__name__)


class DisplayStyle(str, Enum):
    """Visual style of the poster."""

    MINIMAL_BRIGHT = "minimal and bright"
    MODERN_DARK = "modern and dark"
    ELEGANT_LUXURIOUS = "elegant and luxurious"
    COLORFUL = "colorful"
    FUTURISTIC = "futuristic"
    NATURAL_ORGANIC = "natural and organic"
    RETRO_VINTAGE = "retro and vintage"
    BOLD_ENERGETIC = "bold and energetic"


class ContentType(str, Enum):
    """Tone and structure of the caption."""

    SHOWCASE = "showcase"
    STORYTELLING = "storytelling"
    TESTIMONIAL = "testimonial"
    EDUCATIONAL = "educational"
    COMPARISON = "comparison"
    FACTUAL = "factual"
    VIRAL = "viral"
    INTERACTIVE = "interactive"
    CUSTOM = "custom"


# (value, label) pairs in display order
DISPLAY_STYLE_LABELS = [
    (DisplayStyle.MINIMAL_BRIGHT, "Minimal & Bright"),
    (DisplayStyle.MODERN_DARK, "Modern & Dark"),
    (DisplayStyle.ELEGANT_LUXURIOUS, "Elegant & Luxurious"),
    (DisplayStyle.COLORFUL, "Colorful & Vibrant"),
    (DisplayStyle.FUTURISTIC, "Futuristic & Tech"),
    (DisplayStyle.NATURAL_ORGANIC, "Natural & Organic"),
    (DisplayStyle.RETRO_VINTAGE, "Retro & Vintage"),
    (DisplayStyle.BOLD_ENERGETIC, "Bold & Energetic"),
]

CONTENT_TYPE_LABELS = [
    (ContentType.SHOWCASE, "Product Showcase"),
    (ContentType.STORYTELLING, "Storytelling"),
    (ContentType.TESTIMONIAL, "Testimonial"),
    (ContentType.EDUCATIONAL, "Educational / Tips"),
    (ContentType.COMPARISON, "Comparison"),
    (ContentType.FACTUAL, "Factual / Specs"),
    (ContentType.VIRAL, "Viral / Catchy"),
    (ContentType.INTERACTIVE, "Interactive"),
    (ContentType.CUSTOM, "Custom"),
]

SEASONAL_THEMES = [
    ("", "None (Standard)"),
    ("christmas", "Christmas / Natal"),
    ("new year", "New Year / Tahun Baru"),
    ("christmas and new year", "Christmas & New Year"),
    ("holiday season", "Holiday Season / Liburan"),
    ("chinese new year", "Chinese New Year / Imlek"),
    ("ramadan", "Ramadan / Lebaran"),
]


@dataclass(frozen=True)
class ImageBlob:
    """Raw image bytes with their MIME type."""

    data: bytes
    mime_type: str = "image/png"
    filename: str = ""

    @property
    def extension(self) -> str:
        """File extension matching the MIME type."""
        subtype = self.mime_type.split("/")[-1].lower()
        return {"jpeg": "jpg", "svg+xml": "svg"}.get(subtype, subtype or "png")

    def __bool__(self) -> bool:
        return bool(self.data)

    def __repr__(self) -> str:
        return f"ImageBlob(mime_type={self.mime_type!r}, size={len(self.data)})"


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the user typed and uploaded for one poster.

    Only ``product_name`` and ``product_image`` gate submission; the other
    required form fields are checked by the UI before a request is built.
    """

    product_name: str
    product_image: ImageBlob | None
    product_description: str = ""
    display_style: DisplayStyle | str = ""
    content_type: ContentType | str = ""
    price_info: str = ""
    promo_info: str = ""
    feature_1: str = ""
    feature_2: str = ""
    feature_3: str = ""
    seasonal_theme: str = ""
    logo_image: ImageBlob | None = None

    def can_submit(self) -> bool:
        """Check the preconditions for text generation.

        Returns:
            True if a non-blank product name and a non-empty product image are present
        """
        return bool(self.product_name and self.product_name.strip()) and bool(self.product_image)

    def prompt_fields(self) -> dict[str, str]:
        """Text fields in the order and naming the system instruction expects."""
        return {
            "product_name": self.product_name,
            "product_description": self.product_description,
            "display_style": _enum_value(self.display_style),
            "content_type": _enum_value(self.content_type),
            "price_info": self.price_info,
            "promo_info": self.promo_info,
            "feature_1": self.feature_1,
            "feature_2": self.feature_2,
            "feature_3": self.feature_3,
            "seasonal_theme": self.seasonal_theme,
        }


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class GeneratedContent:
    """Output of text generation: the image prompt, caption, and hashtags."""

    image_prompt: str
    caption: str
    hashtags: str

    REQUIRED_FIELDS = ("image_prompt", "caption", "hashtags")

    @classmethod
    def from_json(cls, text: str | None) -> "GeneratedContent":
        """Parse the collaborator's JSON reply.

        Args:
            text: Raw response text

        Returns:
            Parsed content

        Raises:
            ContentFormatError: If the text is empty, not a JSON object, or
                a required field is missing or not a string
        """
        if not text or not text.strip():
            raise ContentFormatError("No response from Gemini")

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ContentFormatError(f"Response is not valid JSON: {e.msg}") from e

        if not isinstance(payload, dict):
            raise ContentFormatError("Response JSON is not an object")

        missing = [
            name for name in cls.REQUIRED_FIELDS if not isinstance(payload.get(name), str)
        ]
        if missing:
            raise ContentFormatError(f"Response is missing required field(s): {', '.join(missing)}")

        return cls(
            image_prompt=payload["image_prompt"],
            caption=payload["caption"],
            hashtags=payload["hashtags"],
        )

    def with_changes(self, **changes: str) -> "GeneratedContent":
        """Return a copy with user edits applied.

        Raises:
            ValueError: If an unknown field is given
        """
        unknown = set(changes) - set(self.REQUIRED_FIELDS)
        if unknown:
            raise ValueError(f"Unknown content field(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)


@dataclass(frozen=True)
class PaymentSession:
    """A payment-session token and the purchase it was issued for."""

    token: str
    product_label: str
    amount: int
