"""Natural string ordering for tree labels.

Embedded numbers compare by magnitude, so "VM2" sorts before "VM10".
"""

from __future__ import annotations

from functools import cmp_to_key


def _digit_run_end(text: str, start: int) -> int:
    end = start
    while end < len(text) and text[end].isdigit():
        end += 1
    return end


def natural_compare(a: str, b: str) -> int:
    """Compare two labels; returns <0, 0 or >0.

    Rules:
    - Case-insensitive throughout.
    - Two digit runs compare by run length first, then digit by digit.
    - At a digit/non-digit mismatch the non-digit sorts first.
    - When one label is a prefix of the other, the shorter sorts first.
    """
    if a.casefold() == b.casefold():
        return 0
    if not a:
        return -1
    if not b:
        return 1

    left = a.casefold()
    right = b.casefold()
    i = j = 0
    while i < len(left) and j < len(right):
        c1 = left[i]
        c2 = right[j]
        d1 = c1.isdigit()
        d2 = c2.isdigit()

        if d1 and d2:
            end1 = _digit_run_end(left, i)
            end2 = _digit_run_end(right, j)
            run1 = left[i:end1]
            run2 = right[j:end2]
            if len(run1) != len(run2):
                return len(run1) - len(run2)
            if run1 != run2:
                return -1 if run1 < run2 else 1
            i = end1
            j = end2
        elif d1 != d2:
            return 1 if d1 else -1
        else:
            if c1 != c2:
                return -1 if c1 < c2 else 1
            i += 1
            j += 1

    return (len(left) - i) - (len(right) - j)


natural_sort_key = cmp_to_key(natural_compare)


def natural_sorted(labels: list[str]) -> list[str]:
    """Return labels in natural order."""
    return sorted(labels, key=natural_sort_key)


__all__ = [
    "natural_compare",
    "natural_sort_key",
    "natural_sorted",
]
