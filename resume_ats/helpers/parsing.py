import re

MIN_USABLE_CHARS = 100
MAX_NON_PRINTABLE_RATIO = 0.3
PROMPT_CHAR_LIMIT = 4000

_PRINTABLE = re.compile(r"[\x20-\x7E\n\r\t]")


def clean_text(x: str) -> str:
    x = x.replace("\x00", "")
    x = x.replace("\r\n", "\n").replace("\r", "\n")
    return x.strip()


def is_text_usable(text: str) -> bool:
    """False for empty, very short, or mostly non-printable (broken extraction) text."""
    if not text or len(text.strip()) < MIN_USABLE_CHARS:
        return False
    non_printable = len(_PRINTABLE.sub("", text))
    return non_printable / len(text) <= MAX_NON_PRINTABLE_RATIO


def truncate_for_prompt(text: str, limit: int = PROMPT_CHAR_LIMIT) -> str:
    return text[:limit]
