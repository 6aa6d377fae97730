def contains_casefold(haystack: str | None, needle: str | None) -> bool:
    if haystack is None or needle is None:
        return False
    return needle.casefold() in haystack.casefold()


def extract_bearer_token(header: str | None) -> str | None:
    # "Bearer <token>" or a bare "<token>"
    if not header:
        return None
    parts = header.split(" ")
    token = parts[1] if len(parts) == 2 else parts[0]
    return token or None
