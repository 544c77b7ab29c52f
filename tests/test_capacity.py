import math

import pytest

from vouchergen.generator import (
    CapacityError,
    GeneratorOptions,
    PlaceholderCounts,
    calculate_repetitions,
    check_requested_codes,
    count_fixed_permutations,
    needed_chars,
    plan_capacity,
)

OPTIONS = GeneratorOptions()
ALNUM_BASE = len(OPTIONS.alphanumeric_chars)


@pytest.mark.parametrize(
    "counts,expected",
    [
        (PlaceholderCounts(), 0),
        (PlaceholderCounts(num=2), 100),
        (PlaceholderCounts(alnum=1), ALNUM_BASE),
        (PlaceholderCounts(num=2, alnum=1), 100 * ALNUM_BASE),
        (PlaceholderCounts(num=1, num_var=3, alnum_var=1), 10),
    ],
)
def test_count_fixed_permutations(counts: PlaceholderCounts, expected: int):
    assert count_fixed_permutations(counts, OPTIONS) == expected


def test_feasibility_boundary():
    assert check_requested_codes("##", 5, 95, OPTIONS) == 100

    with pytest.raises(CapacityError) as exc_info:
        check_requested_codes("##", 6, 95, OPTIONS)
    exc = exc_info.value
    assert exc.requested == 6
    assert exc.maximum == 100
    assert exc.existing == 95
    assert exc.sparsity == 1
    assert str(exc) == (
        "Cannot generate 6 codes. Maximum: 100, existing: 95, sparsity: 1.0"
    )

    # halves round up: 5 permutations at sparsity 2 report a maximum of 3
    odd = GeneratorOptions(numeric_chars="01234", sparsity=2)
    with pytest.raises(CapacityError) as exc_info:
        check_requested_codes("#", 3, 0, odd)
    assert exc_info.value.maximum == 3


def test_sparsity_makes_check_stricter():
    check_requested_codes("##", 20, 0, OPTIONS)

    sparse = OPTIONS.copy_with(sparsity=10)
    check_requested_codes("##", 10, 0, sparse)
    with pytest.raises(CapacityError) as exc_info:
        check_requested_codes("##", 20, 0, sparse)
    assert exc_info.value.maximum == 10


def test_sparsity_scales_existing_codes():
    sparse = OPTIONS.copy_with(sparsity=2)
    check_requested_codes("##", 25, 25, sparse)
    with pytest.raises(CapacityError):
        check_requested_codes("##", 26, 25, sparse)


def test_literal_pattern_has_one_permutation():
    assert check_requested_codes("FIXED", 1, 0, OPTIONS) == 1
    with pytest.raises(CapacityError) as exc_info:
        check_requested_codes("FIXED", 2, 0, OPTIONS)
    assert exc_info.value.maximum == 1
    with pytest.raises(CapacityError):
        check_requested_codes("FIXED", 1, 1, OPTIONS)


@pytest.mark.parametrize(
    "target,base,expected",
    [
        (1, 10, 1),
        (10, 10, 1),
        (11, 10, 2),
        (1000, 10, 3),
        (1001, 10, 4),
        (33, 33, 1),
        (34, 33, 2),
        (2**20, 2, 20),
    ],
)
def test_needed_chars(target: int, base: int, expected: int):
    assert needed_chars(target, base) == expected


def test_needed_chars_matches_logarithm():
    for target in range(2, 5000, 7):
        assert needed_chars(target, 10) == math.ceil(math.log10(target) - 1e-12)


def test_calculate_repetitions_single_token():
    assert calculate_repetitions("V-#+", 50, 0, OPTIONS) == [2]
    assert calculate_repetitions("V-#+", 101, 0, OPTIONS) == [3]
    assert calculate_repetitions("V-*+", 50, 0, OPTIONS) == [2]


def test_calculate_repetitions_counts_existing():
    assert calculate_repetitions("V-#+", 50, 0, OPTIONS) == [2]
    assert calculate_repetitions("V-#+", 50, 60, OPTIONS) == [3]


def test_calculate_repetitions_distributes_deficit():
    # deficit of 2000 split over two tokens
    lengths = calculate_repetitions("#+-*+", 2000, 0, OPTIONS)
    assert lengths == [needed_chars(1000, 10), needed_chars(1000, ALNUM_BASE)]
    assert lengths == [3, 2]


def test_calculate_repetitions_subtracts_fixed_permutations():
    # the fixed part covers the request, one char is still allocated
    assert calculate_repetitions("##-#+", 50, 0, OPTIONS) == [1]


def test_calculate_repetitions_applies_sparsity():
    sparse = OPTIONS.copy_with(sparsity=100)
    assert calculate_repetitions("A#+", 10, 0, sparse) == [3]


def test_variable_length_is_monotonic():
    previous = 0
    for how_many in range(1, 20000, 97):
        (length,) = calculate_repetitions("A#+", how_many, 0, OPTIONS)
        assert length >= previous
        previous = length


def test_plan_capacity_fixed():
    plan = plan_capacity("**-##", 10, 0, OPTIONS)
    assert plan.variable is False
    assert plan.fixed_permutations == ALNUM_BASE**2 * 100
    assert plan.lengths == []

    with pytest.raises(CapacityError):
        plan_capacity("#", 11, 0, OPTIONS)


def test_plan_capacity_variable():
    plan = plan_capacity("*-#+-*+", 10**6, 10**9, OPTIONS)
    assert plan.variable is True
    assert plan.fixed_permutations == ALNUM_BASE
    assert len(plan.lengths) == 2


def test_calculate_repetitions_without_variable_tokens():
    assert calculate_repetitions("##", 5, 0, OPTIONS) == []
