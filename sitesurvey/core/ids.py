import string
import time
import uuid

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(value: int, width: int) -> str:
    chars = []
    while value:
        value, rem = divmod(value, 36)
        chars.append(_ALPHABET[rem])
    return "".join(reversed(chars)).rjust(width, "0")[-width:]


def generate_id(prefix: str) -> str:
    """Genera un identificador `prefijo-timestamp-sufijo` para un nodo nuevo"""
    millis = int(time.time() * 1000)
    suffix = _base36(uuid.uuid4().int, 9)
    return f"{prefix}-{millis}-{suffix}"
