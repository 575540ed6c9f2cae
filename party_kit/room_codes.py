"""Short join codes for game rooms.

Codes are six characters from an alphabet without the look-alikes 0/O and
1/I, so players can read them off a screen and type them back. Codes typed
by players go through normalize() before lookup, exactly like generated
ones.

allocate() only guarantees a code was free when it was checked. The
session store's exclusive create is the real uniqueness guarantee; callers
that hit RoomCodeTaken on insert allocate again.
"""

from __future__ import annotations

import logging
import random
import secrets
from collections.abc import Awaitable, Callable

from party_kit.errors import ConflictError

logger = logging.getLogger(__name__)

ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6
MAX_ATTEMPTS = 20

ExistsFn = Callable[[str], Awaitable[bool]]


def generate_code(rng: random.Random | None = None) -> str:
    if rng is not None:
        return "".join(rng.choice(ALPHABET) for _ in range(CODE_LENGTH))
    return "".join(secrets.choice(ALPHABET) for _ in range(CODE_LENGTH))


def normalize(code: str) -> str:
    return code.strip().upper()


def is_valid(code: str) -> bool:
    code = normalize(code)
    return len(code) == CODE_LENGTH and all(ch in ALPHABET for ch in code)


async def allocate(
    exists: ExistsFn,
    max_attempts: int = MAX_ATTEMPTS,
    generate: Callable[[], str] = generate_code,
) -> str:
    """Return the first generated code that `exists` reports as free."""
    for attempt in range(1, max_attempts + 1):
        candidate = normalize(generate())
        if not await exists(candidate):
            if attempt > 1:
                logger.debug("room code %s found after %d attempts", candidate, attempt)
            return candidate
        logger.debug("room code collision on %s (attempt %d)", candidate, attempt)
    raise ConflictError(f"Could not allocate a free room code after {max_attempts} attempts")
