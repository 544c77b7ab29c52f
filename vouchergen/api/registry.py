from functools import lru_cache
from typing import Iterable


class IssuedCodeRegistry:
    """
    Process-local record of the codes handed out per pattern.
    """

    _codes_by_pattern: dict[str, set[str]]

    def __init__(self) -> None:
        self._codes_by_pattern = {}

    def get_codes(self, pattern: str) -> set[str]:
        return self._codes_by_pattern.get(pattern, set()).copy()

    def add_codes(self, pattern: str, codes: Iterable[str]) -> None:
        try:
            issued = self._codes_by_pattern[pattern]
        except KeyError:
            issued = self._codes_by_pattern[pattern] = set()
        issued.update(codes)

    def forget(self, pattern: str) -> int:
        return len(self._codes_by_pattern.pop(pattern, ()))


@lru_cache()
def get_code_registry() -> IssuedCodeRegistry:
    return IssuedCodeRegistry()
