# common/utils.py

import math
import re

WORDS_PER_MINUTE = 200

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify_title(title):
    """
    Lowercase the title, collapse every run of non-alphanumeric characters
    into a single hyphen and strip hyphens from both ends.

    "Modern 3BR Condo!!" -> "modern-3br-condo"
    """
    if not title:
        return ''
    return _NON_ALNUM.sub('-', title.lower()).strip('-')


def estimate_read_time(content):
    """Minutes needed to read `content` at 200 words per minute (at least 1)."""
    word_count = len((content or '').split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def clean_string_list(values, lowercase=False):
    """Trim, optionally lowercase, and drop empty entries from a list of strings."""
    cleaned = []
    for value in values or []:
        if value is None:
            continue
        value = str(value).strip()
        if lowercase:
            value = value.lower()
        if value:
            cleaned.append(value)
    return cleaned
