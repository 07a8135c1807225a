import re

MIN_SELECTOR_TEXT_LENGTH = 100
MIN_BODY_LENGTH = 200
TEASER_MAX_LENGTH = 500
SUBSCRIPTION_MARKER = "subscribe"


def clean_body_text(text):
    """Collapse runs of spaces and tabs to one space and blank-line runs to one blank line."""
    if not text:
        return ""
    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{2,}", "\n\n", text)
    return text.strip()


def is_paywall_teaser(text, brand):
    """True when the text looks like a truncated subscription teaser for `brand`."""
    lowered = text.lower()
    return (
        len(text) < TEASER_MAX_LENGTH
        and SUBSCRIPTION_MARKER in lowered
        and bool(brand)
        and brand.lower() in lowered
    )


def evaluate_body(text, brand):
    """Apply the availability rule to extracted body text.

    Returns (body_text, body_available); body_text is None whenever the body
    is not available.
    """
    text = clean_body_text(text)
    available = len(text) > MIN_BODY_LENGTH and not is_paywall_teaser(text, brand)
    return (text if available else None), available
