import dataclasses
import enum
from typing import Iterator, NamedTuple

from .options import GeneratorOptions


class PlaceholderKind(str, enum.Enum):
    NUM = "num"
    ALNUM = "alnum"
    NUM_VAR = "num_var"
    ALNUM_VAR = "alnum_var"

    @property
    def is_variable(self) -> bool:
        return self in (PlaceholderKind.NUM_VAR, PlaceholderKind.ALNUM_VAR)

    @property
    def is_numeric(self) -> bool:
        return self in (PlaceholderKind.NUM, PlaceholderKind.NUM_VAR)

    def get_alphabet(self, options: GeneratorOptions) -> str:
        if self.is_numeric:
            return options.numeric_chars
        return options.alphanumeric_chars


@dataclasses.dataclass(frozen=True, kw_only=True)
class Segment:
    """
    A span of the pattern, either literal text (`kind` is `None`) or a single
    placeholder token.
    """

    text: str
    kind: PlaceholderKind | None = None

    @property
    def is_literal(self) -> bool:
        return self.kind is None


class PlaceholderCounts(NamedTuple):
    num: int = 0
    alnum: int = 0
    num_var: int = 0
    alnum_var: int = 0

    @property
    def fixed(self) -> int:
        return self.num + self.alnum

    @property
    def variable(self) -> int:
        return self.num_var + self.alnum_var

    @property
    def total(self) -> int:
        return self.fixed + self.variable


def _iter_segments(pattern: str, options: GeneratorOptions) -> Iterator[Segment]:
    kinds_by_char = {
        options.numeric_placeholder: (PlaceholderKind.NUM, PlaceholderKind.NUM_VAR),
        options.alphanumeric_placeholder: (
            PlaceholderKind.ALNUM,
            PlaceholderKind.ALNUM_VAR,
        ),
    }
    literal_start = 0
    pos = 0
    while pos < len(pattern):
        try:
            fixed_kind, variable_kind = kinds_by_char[pattern[pos]]
        except KeyError:
            pos += 1
            continue

        if literal_start < pos:
            yield Segment(text=pattern[literal_start:pos])

        # the variable token has to win, otherwise "#+" reads as "#" and "+"
        if pattern.startswith(options.variable_suffix, pos + 1):
            yield Segment(text=pattern[pos : pos + 2], kind=variable_kind)
            pos += 2
        else:
            yield Segment(text=pattern[pos], kind=fixed_kind)
            pos += 1
        literal_start = pos

    if literal_start < len(pattern):
        yield Segment(text=pattern[literal_start:])


def scan_pattern(
    pattern: str, options: GeneratorOptions | None = None
) -> tuple[Segment, ...]:
    """
    Splits `pattern` left to right into literal and placeholder segments.
    """
    if options is None:
        options = GeneratorOptions()
    return tuple(_iter_segments(pattern, options))


def count_placeholders(
    pattern: str, options: GeneratorOptions | None = None
) -> PlaceholderCounts:
    counts = dict.fromkeys(PlaceholderKind, 0)
    for segment in scan_pattern(pattern, options):
        if segment.kind is not None:
            counts[segment.kind] += 1
    return PlaceholderCounts(
        num=counts[PlaceholderKind.NUM],
        alnum=counts[PlaceholderKind.ALNUM],
        num_var=counts[PlaceholderKind.NUM_VAR],
        alnum_var=counts[PlaceholderKind.ALNUM_VAR],
    )


def has_variable_placeholder(
    pattern: str, options: GeneratorOptions | None = None
) -> bool:
    return count_placeholders(pattern, options).variable > 0


__all__ = [
    PlaceholderKind.__name__,
    Segment.__name__,
    PlaceholderCounts.__name__,
    scan_pattern.__name__,
    count_placeholders.__name__,
    has_variable_placeholder.__name__,
]
