"""UI event handlers organized by feature area.

- generation: caption and poster generation, content edits
- payment: simulated-checkout confirmation and poster download
"""

from .generation import (
    edit_generated_content,
    generate_poster_image,
    generate_poster_text,
)
from .payment import (
    confirm_payment,
    decline_payment,
    download_poster,
    run_with_confirmation,
)

__all__ = [
    # Generation handlers
    "edit_generated_content",
    "generate_poster_image",
    "generate_poster_text",
    # Payment handlers
    "confirm_payment",
    "decline_payment",
    "download_poster",
    "run_with_confirmation",
]
