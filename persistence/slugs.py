"""URL slugs for projects.

``normalize_slug`` is pure; ``SlugAllocator`` probes the store for the first
free candidate. The probe is optimistic: two writers can pick the same slug,
and the store's unique constraint decides which insert wins.
"""

import re

MAX_SLUG_LENGTH = 255
FALLBACK_BASE = "project"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_slug(title: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', trim, cap at 255 chars.

    Returns an empty string when the title has no ASCII letters or digits.
    """
    slug = _NON_ALNUM.sub("-", title.lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


def _with_suffix(base: str, counter: int) -> str:
    suffix = f"-{counter}"
    return base[:MAX_SLUG_LENGTH - len(suffix)].rstrip("-") + suffix


class SlugAllocator:
    """Pick the first unused slug for a title: base, base-1, base-2, ...

    Args:
        store: Anything with ``slug_exists(slug) -> bool``
    """

    def __init__(self, store):
        self._store = store

    def allocate(self, title: str) -> str:
        base = normalize_slug(title) or FALLBACK_BASE
        candidate = base
        counter = 0
        while self._store.slug_exists(candidate):
            counter += 1
            candidate = _with_suffix(base, counter)
        return candidate
