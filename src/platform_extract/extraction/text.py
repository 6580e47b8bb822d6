"""
Text normalization and UI-noise removal.

Every extracted field passes through here: whitespace is collapsed,
interaction labels with their counters ("点赞 245", "like 12", "follow")
are stripped from either end, bare numbers are discarded, and the result
is cut to the field's length cap.
"""

import re

# Interaction labels rendered next to counters on the target platforms
NOISE_LABELS_CJK = ("取消关注", "点赞", "收藏", "评论", "分享", "关注")
NOISE_LABELS_LATIN = ("unfollow", "follow", "likes", "like", "shares", "share",
                      "comments", "comment", "collect")

_CJK_LABEL = "(?:" + "|".join(NOISE_LABELS_CJK) + ")"
_LATIN_LABEL = "(?:" + "|".join(NOISE_LABELS_LATIN) + ")"

# CJK labels are noise anywhere at the edges; Latin labels are ordinary
# words too, so they count only with a counter or standing alone.
_LABEL_WITH_COUNT = rf"(?:{_CJK_LABEL}\s*\d*|\b{_LATIN_LABEL}\s*\d+\b)"

_LEADING_NOISE = re.compile(rf"^{_LABEL_WITH_COUNT}", re.IGNORECASE)
_TRAILING_NOISE = re.compile(rf"\s*{_LABEL_WITH_COUNT}$", re.IGNORECASE)
_NOISE_PREFIX = re.compile(rf"^{_LABEL_WITH_COUNT}", re.IGNORECASE)
_BARE_LATIN_LABEL = re.compile(rf"^{_LATIN_LABEL}$", re.IGNORECASE)
_NUMERIC_ONLY = re.compile(r"^\d+$")
_TRAILING_NUMBER = re.compile(r"\s+\d+$")
_WHITESPACE = re.compile(r"\s+")

# CJK runs of two or more characters, Latin runs of three or more letters
WORD_TOKEN = re.compile(r"[\u4e00-\u9fa5]{2,}|[a-zA-Z]{3,}")


def clean_text(text: str) -> str:
    """Collapse all whitespace runs to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def remove_ui_noise(text: str) -> str:
    """
    Strip interaction labels and their counters from both ends.

    A Latin label such as "share" is stripped only with a counter or when
    it is the whole text. A text that is only digits becomes empty.

    Example:
        >>> remove_ui_noise("点赞 245 Great pasta recipe 收藏 12")
        'Great pasta recipe'
    """
    previous = None
    while text != previous:
        previous = text
        text = _LEADING_NOISE.sub("", text).strip()
        text = _TRAILING_NOISE.sub("", text).strip()
    if _NUMERIC_ONLY.match(text) or _BARE_LATIN_LABEL.match(text):
        return ""
    return text


def strip_trailing_number(text: str) -> str:
    """Remove a dangling counter such as the ``12`` in ``"Nice view 12"``."""
    return _TRAILING_NUMBER.sub("", text)


def is_noise_token(text: str) -> bool:
    """True for pure numbers, bare labels and strings starting with a label and count."""
    return bool(
        _NUMERIC_ONLY.match(text)
        or _BARE_LATIN_LABEL.match(text)
        or _NOISE_PREFIX.match(text)
    )


def count_word_tokens(text: str) -> int:
    return len(WORD_TOKEN.findall(text))


def truncate(text: str, max_length: int) -> str:
    return text[:max_length]


def normalize(text: str, max_length: int | None = None) -> str:
    """
    Whitespace collapse, noise removal, trailing counter strip, length cap.

    Repeats until nothing changes, so normalizing twice is the same as
    normalizing once even when a cut or a strip exposes new noise.
    """
    previous = None
    while text != previous:
        previous = text
        text = strip_trailing_number(remove_ui_noise(clean_text(text)))
        if max_length is not None:
            text = truncate(text, max_length)
    return text
