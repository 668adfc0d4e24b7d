"""Random token sources for booking references and confirmation numbers."""

import secrets
import string
from collections.abc import Callable, Iterable, Iterator

TOKEN_ALPHABET = string.ascii_uppercase + string.digits

# Returns an uppercase alphanumeric token of the requested length
TokenSource = Callable[[int], str]


def random_token(length: int) -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


class SequenceTokenSource:
    """Replays fixed tokens in order. Used for deterministic output."""

    def __init__(self, tokens: Iterable[str]):
        self._tokens: Iterator[str] = iter(tokens)

    def __call__(self, length: int) -> str:
        token = next(self._tokens)
        if len(token) != length:
            raise ValueError(f"Token '{token}' does not have length {length}")
        return token
