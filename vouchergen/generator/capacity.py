import dataclasses
import logging
import math

from pydantic import BaseModel

from .options import GeneratorOptions
from .pattern import PlaceholderCounts, count_placeholders, scan_pattern

_LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass(kw_only=True)
class CapacityError(Exception):
    requested: int
    maximum: int
    existing: int
    sparsity: float

    def __str__(self) -> str:
        return (
            f"Cannot generate {self.requested} codes. Maximum: {self.maximum}, "
            f"existing: {self.existing}, sparsity: {self.sparsity}"
        )


class CapacityPlan(BaseModel):
    variable: bool
    fixed_permutations: int
    # one entry per variable placeholder, left to right
    lengths: list[int]


def scale(count: int, sparsity: float) -> int:
    return math.ceil(count * sparsity)


def count_fixed_permutations(
    counts: PlaceholderCounts, options: GeneratorOptions
) -> int:
    numeric = 0
    if counts.num:
        numeric = len(options.numeric_chars) ** counts.num
    alphanumeric = 0
    if counts.alnum:
        alphanumeric = len(options.alphanumeric_chars) ** counts.alnum
    if numeric > 0 and alphanumeric > 0:
        return numeric * alphanumeric
    # only one placeholder family present, the capacity thresholds rely on
    # this sum rather than a combined count
    return numeric + alphanumeric


def check_requested_codes(
    pattern: str, how_many: int, existing_count: int, options: GeneratorOptions
) -> int:
    """
    Raises `CapacityError` if the fixed placeholders of `pattern` can't provide
    `how_many` more codes. Returns the number of possible permutations.
    """
    counts = count_placeholders(pattern, options)
    possible = count_fixed_permutations(counts, options)
    if counts.total == 0:
        # the literal pattern itself is the only code
        possible = 1

    available = possible - scale(existing_count, options.sparsity)
    _LOGGER.debug(
        "pattern %r: %s permutations, %s available", pattern, possible, available
    )
    if available < scale(how_many, options.sparsity):
        raise CapacityError(
            requested=how_many,
            maximum=math.floor(possible / options.sparsity + 0.5),
            existing=existing_count,
            sparsity=options.sparsity,
        )
    return possible


def needed_chars(target: int, alphabet_size: int) -> int:
    """
    Smallest length whose permutations over `alphabet_size` chars reach `target`,
    but never less than one character.
    """
    length = 1
    while alphabet_size**length < target:
        length += 1
    return length


def calculate_repetitions(
    pattern: str, how_many: int, existing_count: int, options: GeneratorOptions
) -> list[int]:
    segments = scan_pattern(pattern, options)
    counts = count_placeholders(pattern, options)
    if not counts.variable:
        return []
    fixed_permutations = count_fixed_permutations(counts, options)

    deficit = max(
        1,
        scale(how_many, options.sparsity)
        - fixed_permutations
        + scale(existing_count, options.sparsity),
    )
    per_token = math.ceil(deficit / counts.variable)

    lengths: list[int] = []
    for segment in segments:
        if segment.kind is None or not segment.kind.is_variable:
            continue
        alphabet = segment.kind.get_alphabet(options)
        lengths.append(needed_chars(per_token, len(alphabet)))

    _LOGGER.debug("pattern %r: variable lengths %s", pattern, lengths)
    return lengths


def plan_capacity(
    pattern: str, how_many: int, existing_count: int, options: GeneratorOptions
) -> CapacityPlan:
    counts = count_placeholders(pattern, options)
    if counts.variable:
        return CapacityPlan(
            variable=True,
            fixed_permutations=count_fixed_permutations(counts, options),
            lengths=calculate_repetitions(pattern, how_many, existing_count, options),
        )

    possible = check_requested_codes(pattern, how_many, existing_count, options)
    return CapacityPlan(variable=False, fixed_permutations=possible, lengths=[])


__all__ = [
    CapacityError.__name__,
    CapacityPlan.__name__,
    count_fixed_permutations.__name__,
    check_requested_codes.__name__,
    needed_chars.__name__,
    calculate_repetitions.__name__,
    plan_capacity.__name__,
]
