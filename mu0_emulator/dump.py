"""Memory dump formatting. Debug aid only; the CPU never calls this."""

from typing import Iterable, List


def dump_memory(words: Iterable[int], trim_trailing_zeros: bool = True) -> str:
    """One 16-bit binary string per word, newline separated.

    With trim_trailing_zeros the dump stops at the last non-zero word
    (an all-zero memory dumps as the empty string).
    """
    words: List[int] = list(words)
    if trim_trailing_zeros:
        end = len(words)
        while end and words[end - 1] == 0:
            end -= 1
        words = words[:end]
    return '\n'.join(f"{w & 0xFFFF:016b}" for w in words)
