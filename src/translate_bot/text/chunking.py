DEFAULT_MIN_CHUNK_BYTES = 1600
DEFAULT_MAX_CHUNK_BYTES = 1800

# The widest UTF-8 encoded character.
MAX_UTF8_CHARACTER_BYTES = 4

NEWLINE = ord("\n")


def is_utf8_continuation(byte: int) -> bool:
    """Whether the byte is a UTF-8 continuation byte (0b10xxxxxx)."""
    return (byte & 0xC0) == 0x80


def find_cut(data: bytes, min_bytes: int, max_bytes: int) -> int:
    """Find where to end the next chunk of `data`, which must be longer than `max_bytes`.

    The last newline after `min_bytes` is preferred, otherwise the chunk is cut at `max_bytes`. The cut is then moved
    back to the start of the character it falls in.
    """

    cut = max_bytes
    while cut > min_bytes and data[cut] != NEWLINE:
        cut -= 1

    if cut <= min_bytes:
        cut = max_bytes

    while cut > 0 and is_utf8_continuation(data[cut]):
        cut -= 1

    return cut


def validate_chunk_bounds(min_bytes: int, max_bytes: int) -> None:
    if min_bytes < 0 or min_bytes >= max_bytes:
        msg = f"Chunk bounds must satisfy 0 <= min_bytes < max_bytes, got min_bytes={min_bytes}, max_bytes={max_bytes}"
        raise ValueError(msg)

    if max_bytes < MAX_UTF8_CHARACTER_BYTES:
        msg = f"max_bytes must be at least {MAX_UTF8_CHARACTER_BYTES} to fit any character, got {max_bytes}"
        raise ValueError(msg)


def split_by_newline_chunk(
    message: str, min_bytes: int = DEFAULT_MIN_CHUNK_BYTES, max_bytes: int = DEFAULT_MAX_CHUNK_BYTES
) -> list[str]:
    """Split a message into chunks of at most `max_bytes` UTF-8 bytes.

    Chunks end just before a newline found between `min_bytes` and `max_bytes` when there is one, so the newline
    starts the following chunk. Joining the chunks gives back the message.
    """

    validate_chunk_bounds(min_bytes=min_bytes, max_bytes=max_bytes)

    data: bytes = message.encode("utf-8")

    if len(data) <= max_bytes:
        return [message]

    parts: list[str] = []

    while data:
        if len(data) <= max_bytes:
            parts.append(data.decode("utf-8"))
            break

        cut = find_cut(data, min_bytes=min_bytes, max_bytes=max_bytes)

        parts.append(data[:cut].decode("utf-8"))
        data = data[cut:]

    return parts
