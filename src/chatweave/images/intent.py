"""Lexical detection of image-generation requests.

A heuristic, not a model: false positives and negatives are tolerated
because the image path falls back to a text answer.
"""

import re

IMAGE_REQUEST_PHRASES: tuple[str, ...] = (
    # English
    "create an image", "generate an image", "make an image", "design an image",
    "create a picture", "generate a picture", "make a picture", "show a picture",
    "show me an image", "show me a picture", "create a visual", "generate a photo",
    "create photo", "create picture", "picture of", "photo of", "image of",
    "can you draw", "draw me", "draw a ", "paint a ", "sketch a ",
    "generate art", "create art", "visual representation", "illustration of",
    # Hindi (transliterated)
    "photo banao", "tasveer banao", "chitra banao", "image banao", "picture banao",
    "ek photo", "ek tasveer", "ek chitra", "create karo",
)

IMAGE_REQUEST_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bwhat (?:does|do|did|would|will) .{1,40}? look(?:s)? like\b"),
    re.compile(r"\bhow .{1,20}? (?:looks|look like)\b(?! (?:up|at|for|into|after)\b)"),
    re.compile(r"\bshow me .{0,20}?\b(?:picture|image|photo)s? (?:of|about)\b"),
    re.compile(
        r"\b(?:create|make|generate|show|draw|render)\b.{0,30}?"
        r"\b(?:picture|image|photo|visual|illustration|drawing|painting)s?\b"
    ),
)


def is_image_intent(text: str) -> bool:
    """Return True if the text looks like a request to produce an image.

    Args:
        text: Raw user message

    Returns:
        Whether the image path should be attempted
    """
    lowered = text.lower()
    if any(phrase in lowered for phrase in IMAGE_REQUEST_PHRASES):
        return True
    return any(pattern.search(lowered) for pattern in IMAGE_REQUEST_PATTERNS)
