import secrets


def generate_uid(length: int = 12) -> str:
    """Random hex identifier used as an opaque connection handle."""
    return secrets.token_hex((length + 1) // 2)[:length]
