"""
Constant-time secret comparison for company keys.
"""


def _code_at(value: str, index: int) -> int:
    """Code point at ``index``, or 0 past the end of ``value``."""
    return ord(value[index]) if index < len(value) else 0


def safe_compare_secret(left: str, right: str) -> bool:
    """
    Compare two secrets without short-circuiting on the first mismatch.

    Every position up to ``max(len(left), len(right))`` is visited. The
    shorter string is padded with code point 0 and a length mismatch is
    folded into the accumulator, so ``"abc"`` never equals ``"abc\\0"``.
    """
    max_length = max(len(left), len(right))
    mismatch = 0 if len(left) == len(right) else 1

    for index in range(max_length):
        mismatch |= _code_at(left, index) ^ _code_at(right, index)

    return mismatch == 0
