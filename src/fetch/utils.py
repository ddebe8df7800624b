REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


def is_redirect(code: int) -> bool:
    """Whether `code` is a redirect status code."""
    return code in REDIRECT_STATUSES
