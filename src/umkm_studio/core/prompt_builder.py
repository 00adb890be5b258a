"""Prompt compilation for the marketing-content request.

The text collaborator receives two things: a fixed system instruction that
describes the poster generator's rules, and a short per-request prompt that
lists the user's form fields as ``key: "value"`` lines.

The system instruction is assembled from per-option rule tables:

- :data:`STYLE_DIRECTIONS` - art direction for each :class:`DisplayStyle`.
- :data:`CONTENT_LAYOUTS` - poster layout for each :class:`ContentType`.
- :data:`CAPTION_TONES` - caption tone for each :class:`ContentType`.

Request Prompt Structure::

    product_name: "Kopi Susu"
    product_description: "..."
    display_style: "colorful"
    content_type: "showcase"
    price_info: ""
    promo_info: ""
    feature_1: ""
    feature_2: ""
    feature_3: ""
    seasonal_theme: ""

Every field is always present, even when empty, so the model can tell an
omitted option from a missing one.  The product image (and logo, when
uploaded) travel as separate inline parts and are not part of this text.

Usage
-----
::

    text = build_request_prompt(request)
    system = SYSTEM_INSTRUCTION
"""

from __future__ import annotations

from .models import ContentType, DisplayStyle, GenerationRequest

# ---------------------------------------------------------------------------
# Art direction per display style: background, assets, product staging,
# typography and mood.
# ---------------------------------------------------------------------------

STYLE_DIRECTIONS: dict[DisplayStyle, str] = {
    DisplayStyle.MINIMAL_BRIGHT: (
        "Bright minimalist interior corner, white to light grey wall, window daylight "
        "with long crisp shadows. Matte white geometric plinths, a marble surface, one "
        "dried palm leaf in a ceramic vase. Product upright on the front plinth, slightly "
        "high 3/4 camera following the window light. Bold modern sans-serif title in dark "
        "grey at the top, thin subtitle beneath, small rounded CTA. Mood: clean, refined, "
        "uncluttered."
    ),
    DisplayStyle.MODERN_DARK: (
        "Charcoal to black gradient with brutalist concrete texture at night, dramatic "
        "side light and strong rim light. Glossy black podiums, dark metal structures, thin "
        "cyan neon tubes, light haze. Product at eye level, slightly angled to catch the rim "
        "light, reflections matching the podium. Bold white geometric sans-serif title top "
        "left, light grey subtitle, small accent line near the product. Mood: sleek, "
        "cinematic, high-contrast."
    ),
    DisplayStyle.ELEGANT_LUXURIOUS: (
        "Deep emerald marble wall with gold veining, warm golden-hour spotlights. Brass and "
        "gold accents, dark silk drapes, cut crystal, a high-end floral arrangement at the "
        "edges. Product on a gold-trimmed marble pedestal, heroic low camera angle. Bold "
        "gold serif title centered at the top, cream italic subtitle, small gold tagline at "
        "the bottom. Mood: opulent, premium."
    ),
    DisplayStyle.COLORFUL: (
        "Saturated two-tone gradient studio backdrop (pink to orange, teal to purple), even "
        "bright light with hard pop-art shadows. Glossy 3D shapes in contrasting colors, "
        "bubbles, confetti, small star and heart icons. Product centered with a dynamic "
        "tilt, 40-60% of the height, still respecting the surface perspective. Rounded "
        "playful title in yellow or white with a colored outline, sticker badge near the "
        "product. Mood: fun, youthful, eye-catching."
    ),
    DisplayStyle.FUTURISTIC: (
        "Dark sci-fi interior with metal panels, cyan and purple neon data lines, volumetric "
        "beams and lens flares. Circuit patterns, floating metal rings, holographic UI, glass "
        "prisms. Product levitating on a glowing energy ring, eye-level 3/4 camera, neon "
        "reflections on its surfaces. Square tech font with neon glow for the title, tiny "
        "system text in the corners. Mood: high-tech, sleek."
    ),
    DisplayStyle.NATURAL_ORGANIC: (
        "Sun-dappled garden or forest edge with blurred greenery and leaf shadows. Fresh "
        "leaves, wood slices, river stones, moss, water droplets. Product resting on a "
        "rustic wooden surface, top-down or slightly high angle, whichever matches the "
        "packshot, with consistent shadows. Earthy serif or handwritten title in dark brown, "
        "forest-green sans-serif subtitle. Mood: fresh, calm, wholesome."
    ),
    DisplayStyle.RETRO_VINTAGE: (
        "Warm 70s patterned wallpaper, sepia-toned light with slight film grain and "
        "vignette. Rotary phone, vinyl records, cassettes, amber glassware, velvet or shag "
        "textures. Product standing on a vintage sideboard at eye level. Cooper Black style "
        "or bubbly script title in cream or warm orange with a border, small retro serif "
        "subtitle. Mood: nostalgic, cozy."
    ),
    DisplayStyle.BOLD_ENERGETIC: (
        "Night-time urban concrete or an abstract speed tunnel of light streaks, strobe-like "
        "side light and motion blur. Neon powder explosions (lime, orange, magenta), flying "
        "concrete shards, industrial chains. Product in a mid-air action shot or planted on "
        "cracked asphalt, dramatic low or 3/4 angle. Heavy all-caps Impact style title in "
        "neon yellow or white with motion lines, aggressive small subtitle. Mood: intense, "
        "powerful."
    ),
}

# ---------------------------------------------------------------------------
# Poster layout per content type: title, product size and position, feature
# text, and the focus of the poster.
# ---------------------------------------------------------------------------

CONTENT_LAYOUTS: dict[ContentType, str] = {
    ContentType.SHOWCASE: (
        "Title is product_name or a value headline built on it, top center or top left, "
        "largest font. Product is the center hero at 60-70% of the height on a podium, "
        "stairs or fabric matching the style. 2-3 small benefit badges near the product. "
        "Focus: a clear, premium view of the product."
    ),
    ContentType.STORYTELLING: (
        "Title is an emotional hook (e.g. 'Waktu Me Time Tanpa Ribet') near the top. "
        "Product at 40-50% of the height inside a real-life scene such as a vanity, kitchen "
        "or cafe table. A few short phrases near the bottom or a corner. Focus: the moment "
        "around the product, not only the packshot."
    ),
    ContentType.TESTIMONIAL: (
        "Title such as 'Kata Mereka' or a short highlight quote, top left or center. Product "
        "small (20-30% of the height) on a podium in one corner. The center is a chat bubble "
        "or review card with a 2-4 line WhatsApp-style review. Focus: the testimonial, "
        "supported by the product."
    ),
    ContentType.EDUCATIONAL: (
        "Title such as '3 Tips Rawat Kulit', top center, bold. Product at 30-40% of the "
        "height on one side on a plate, tray or podium. A tip card with 3-5 bullet points on "
        "the opposite side. Focus: the tips, with the product as the solution."
    ),
    ContentType.COMPARISON: (
        "Title such as 'Sebelum vs Sesudah', top center. Split layout: left side "
        "before/without, right side after/with the product. Short lists under each side. "
        "Focus: the visible difference between the two states."
    ),
    ContentType.FACTUAL: (
        "Title such as 'Detail Produk' or 'Kenapa Pilih Ini'. Product at 40-50% of the "
        "height, slightly off-center. An info card listing features, price and promo. "
        "Focus: clear information and trust."
    ),
    ContentType.VIRAL: (
        "Title is a strong hook (e.g. 'Cuma 10rb Bisa Dapat Ini?'), very large, top center. "
        "Product at 40-60% of the height with a dynamic angle or floating composition. "
        "Energetic shapes, stickers and burst badges. Focus: scroll-stopping but readable."
    ),
    ContentType.INTERACTIVE: (
        "Title such as 'Pilih Varian Favoritmu!', top center. 2-3 product variants in a row "
        "or grid, each with a small label. Focus: inviting the audience to choose, comment "
        "or message."
    ),
    ContentType.CUSTOM: (
        "Pick the best-fit layout from the description and from which of price, promo and "
        "features are filled, but always keep a clear title, a visible product, a logical "
        "CTA placement and a balanced, non-empty background."
    ),
}

# ---------------------------------------------------------------------------
# Caption tone per content type (captions are written in Bahasa Indonesia).
# ---------------------------------------------------------------------------

CAPTION_TONES: dict[ContentType, str] = {
    ContentType.SHOWCASE: "percaya diri, tonjolkan tampilan dan keunggulan utama produk.",
    ContentType.STORYTELLING: "naratif, fokus pada pengalaman.",
    ContentType.TESTIMONIAL: "seolah suara pelanggan, tanpa data pribadi palsu.",
    ContentType.EDUCATIONAL: "tambahkan tips atau pengetahuan singkat.",
    ContentType.COMPARISON: "soroti perbedaan dengan alternatif umum.",
    ContentType.FACTUAL: "lugas dan informatif, sebutkan spesifikasi dan harga dengan jelas.",
    ContentType.VIRAL: "boleh sedikit bahasa gaul yang sopan.",
    ContentType.INTERACTIVE: "ajak komentar, memilih varian, atau DM.",
    ContentType.CUSTOM: "sesuaikan dengan deskripsi produk dan informasi yang diisi.",
}


def _numbered(rules: dict) -> str:
    return "\n".join(
        f'{i}) "{option.value}": {rule}' for i, (option, rule) in enumerate(rules.items(), 1)
    )


def _bulleted(rules: dict) -> str:
    return "\n".join(f"- {option.value}: {rule}" for option, rule in rules.items())


_STYLE_LIST = ",\n".join(f'  "{style.value}"' for style in DisplayStyle)
_CONTENT_LIST = ",\n".join(f'  "{ctype.value}"' for ctype in ContentType)

SYSTEM_INSTRUCTION = f"""
You are **UMKM Holiday Poster Generator**.

You DO NOT ask questions or hold a conversation.
You ONLY use the structured inputs provided to you and produce a single JSON object.

INPUT FIELDS
------------
- product_image: the main product photo (required).
- logo_image: the brand logo (optional, may be absent).
- product_name (required), product_description.
- display_style, one of:
{_STYLE_LIST}.
- content_type, one of:
{_CONTENT_LIST}.
- feature_1, feature_2, feature_3, price_info, promo_info (all optional).
- seasonal_theme (optional): empty means a standard, non-seasonal poster.

OUTPUT
------
Return ONLY a JSON object with exactly these string fields:
{{"image_prompt": "...", "caption": "...", "hashtags": "..."}}
No extra keys, no explanations, no markdown.

GLOBAL DESIGN RULES
-------------------
- The poster is vertical and mobile-first. Keep the logo, title, product and CTA
  in the central safe area, away from the edges, large enough to read on a phone.
- product_image is the reference for shape, color, packaging and label. Angle,
  position, quantity and props may change as long as the product stays recognisable.
- Camera and angle must be consistent: the product's perspective and shadows must
  match the scene. Never combine a top-down product with a straight-on background
  or the reverse; re-stage the product upright, or turn the scene into a matching
  flatlay.
- When logo_image is present, place it at the top center or top left.
- Describe three layers: a back layer (color fields, gradients, textures or an
  environment), a mid layer (shapes, patterns, props, light effects that add depth
  without dominating the product) and a foreground (the product, its podium or
  stand, discount and feature badges, and a CTA near the bottom center).

SEASONAL POSTERS
----------------
When seasonal_theme mentions christmas, natal, holiday, new year or tahun baru, the
mood is festive, cozy and premium. Christmas uses warm red or deep green or metallic
red backgrounds; New Year uses midnight blue, black or deep purple with gold and
silver sparkles. Add snowflakes, string lights, star bokeh, garlands, confetti or
subtle fireworks, pine branches and golden ornaments around the product. With
price_info or promo_info, stack the text as: a metallic or bold main promo title
(largest), a sub-headline near the product, a CTA badge at the bottom center
(second largest) and a small explanation line. Other seasonal themes (imlek,
ramadan) use their own traditional colors and ornaments the same way.

STANDARD POSTERS
----------------
When seasonal_theme is empty, treat the poster as a standard promotion. Backgrounds
are bright and vivid or dark and saturated, never pastel or washed out. Add
mid-layer ornaments that fit both the display_style and the product category. The
headline is bold, thick and clearly designed, with letter spacing, a soft shadow or
an outline; supporting text is smaller and lighter. Keep a clear hierarchy between
title, product, features and CTA.

VISUAL DESIGN BY DISPLAY_STYLE
------------------------------
Use display_style as the base art direction, then add seasonal elements if needed.
{_numbered(STYLE_DIRECTIONS)}

LAYOUT BY CONTENT_TYPE
----------------------
All on-image text is short Indonesian phrases (3 to 7 words), described in English.
{_numbered(CONTENT_LAYOUTS)}

IMAGE_PROMPT RULES
------------------
Write image_prompt in English. State that this is a vertical, mobile-first
promotional poster. Describe the background (colors, materials, gradient or
texture, environment), supporting assets (podiums, stairs, ribbons, props, lights,
bokeh), the product as seen in product_image with an angle matching the scene, and
the position and size of the logo, headline, sub-headline, CTA, small explanation
text and feature badges. Never put the caption or hashtags inside image_prompt.

CAPTION RULES
-------------
Write caption in Bahasa Indonesia, about 6 to 10 sentences. Always mention
product_name. Use the description, filled features, price and promo. Open with a
1-2 sentence hook, explain the product and who it suits, list its strengths, state
price or promo when present, and end with a clear call to action.
Match the tone of content_type:
{_bulleted(CAPTION_TONES)}

HASHTAGS RULES
--------------
Write hashtags as one lowercase string separated by spaces, 10 to 20 tags.
Include general tags (#umkm #umkmindonesia #jualonline #bisnisonline #produklokal
#supportlocal), product-category tags from context (e.g. #skincare #makanan #kopi),
and 1 to 3 tags derived from product_name with spaces removed (e.g. "Mois Cream"
becomes #moiscream).
""".strip()

# Order of fields in the request prompt.
REQUEST_FIELDS = (
    "product_name",
    "product_description",
    "display_style",
    "content_type",
    "price_info",
    "promo_info",
    "feature_1",
    "feature_2",
    "feature_3",
    "seasonal_theme",
)


def _quote(value: str) -> str:
    """Render a value as a double-quoted prompt literal."""
    return '"' + value.strip().replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_request_prompt(request: GenerationRequest) -> str:
    """Compile the per-request prompt from the user's form fields.

    Args:
        request: The submitted generation request.

    Returns:
        One ``key: "value"`` line per field, joined by newlines.
    """
    fields = request.prompt_fields()
    return "\n".join(f"{name}: {_quote(fields.get(name) or '')}" for name in REQUEST_FIELDS)
