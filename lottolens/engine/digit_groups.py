"""
LottoLens - Digit Group Table
=============================

Fixed set of digit groups ("patterns") used to classify the trailing digit
of a matched draw number. Each group keeps its digits in a defined order,
which the continuity analysis walks forward or in reverse.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class DigitGroup:
    """Named, ordered set of digits 0-9"""
    key: str
    digits: Tuple[int, ...]

    def __post_init__(self):
        if not self.digits:
            raise ValueError(f"Digit group '{self.key}' has no digits")
        if len(set(self.digits)) != len(self.digits):
            raise ValueError(f"Digit group '{self.key}' contains duplicate digits: {self.digits}")
        for digit in self.digits:
            if not isinstance(digit, int) or not 0 <= digit <= 9:
                raise ValueError(f"Digit group '{self.key}' has out-of-range digit: {digit!r}")

    def __contains__(self, digit) -> bool:
        return digit in self.digits

    def __len__(self) -> int:
        return len(self.digits)

    @property
    def reversed_digits(self) -> Tuple[int, ...]:
        return tuple(reversed(self.digits))

    def to_dict(self) -> Dict:
        return {"key": self.key, "digits": list(self.digits)}


def build_groups(definitions: Iterable[Tuple[str, Iterable[int]]]) -> Tuple[DigitGroup, ...]:
    """
    Build an immutable group table from (key, digits) pairs.

    Raises:
        ValueError: On duplicate keys or invalid digits
    """
    groups: List[DigitGroup] = []
    seen = set()
    for key, digits in definitions:
        if key in seen:
            raise ValueError(f"Duplicate digit group key: {key}")
        seen.add(key)
        groups.append(DigitGroup(key=key, digits=tuple(digits)))
    return tuple(groups)


DIGIT_GROUPS: Tuple[DigitGroup, ...] = build_groups([
    ("pattern1", (0, 1)),
    ("pattern2", (0, 4, 5)),
    ("pattern3", (0, 4, 8)),
    ("pattern4", (0, 8)),
    ("pattern5", (5, 8)),
    ("pattern6", (1, 3, 5, 7, 9)),
    ("pattern7", (1, 3, 7, 9)),
    ("pattern8", (2, 6, 8)),
    ("pattern9", (3, 6)),
])


def groups_for_digit(digit: int, groups: Iterable[DigitGroup] = DIGIT_GROUPS) -> List[DigitGroup]:
    """All groups containing the digit, in table order"""
    return [group for group in groups if digit in group]


def get_group(key: str, groups: Iterable[DigitGroup] = DIGIT_GROUPS) -> DigitGroup:
    for group in groups:
        if group.key == key:
            return group
    raise KeyError(key)
