import logging
import random
from random import Random

from .capacity import plan_capacity
from .options import GeneratorOptions
from .pattern import Segment, scan_pattern

_LOGGER = logging.getLogger(__name__)


class GenerationExhaustedError(RuntimeError):
    def __init__(self, *, attempts: int, generated: int, requested: int) -> None:
        super().__init__(
            f"gave up after {attempts} consecutive collisions "
            f"({generated} of {requested} codes generated)"
        )
        self.attempts = attempts
        self.generated = generated
        self.requested = requested


def random_chars(alphabet: str, count: int, *, rng: Random | None = None) -> str:
    """
    Returns `count` characters, each picked uniformly from `alphabet`.
    """
    randrange = random.randrange if rng is None else rng.randrange
    return "".join(alphabet[randrange(len(alphabet))] for _ in range(count))


class CodeGenerator:
    """
    Generates codes from a pattern, see `generate_codes`.

    Not suitable for secrets, the codes are unpredictable but not
    cryptographically secure.
    """

    _rng: Random

    def __init__(self, *, seed: int | None = None) -> None:
        self._rng = Random(seed)

    def random_chars(self, alphabet: str, count: int) -> str:
        return random_chars(alphabet, count, rng=self._rng)

    def _render(
        self,
        segments: tuple[Segment, ...],
        lengths: list[int],
        options: GeneratorOptions,
    ) -> str:
        lengths_iter = iter(lengths)
        parts: list[str] = []
        for segment in segments:
            if segment.kind is None:
                parts.append(segment.text)
                continue

            count = next(lengths_iter) if segment.kind.is_variable else 1
            parts.append(self.random_chars(segment.kind.get_alphabet(options), count))
        return "".join(parts)

    def generate_codes(
        self,
        pattern: str,
        how_many: int = 1,
        options: GeneratorOptions | None = None,
    ) -> list[str]:
        """
        Generates `how_many` distinct codes following `pattern`, none of which
        are returned by the options' existing codes loader.

        In the pattern, the following placeholders are replaced:
        `#` with a single numeric character,
        `*` with a single alphanumeric character,
        `#+` with as many numeric characters as needed for `how_many` codes,
        `*+` with as many alphanumeric characters as needed.

        Raises `CapacityError` if the pattern has no variable placeholders and
        can't provide enough codes.
        """
        if how_many < 0:
            raise ValueError("how_many must not be negative")
        if how_many == 0:
            return []
        if options is None:
            options = GeneratorOptions()

        existing_codes = options.load_existing_codes(pattern)
        plan = plan_capacity(pattern, how_many, len(existing_codes), options)
        segments = scan_pattern(pattern, options)

        generated: list[str] = []
        seen = set(existing_codes)
        collisions = 0
        consecutive_collisions = 0
        while len(generated) < how_many:
            code = self._render(segments, plan.lengths, options)
            if code in seen:
                collisions += 1
                consecutive_collisions += 1
                if (
                    options.max_attempts is not None
                    and consecutive_collisions >= options.max_attempts
                ):
                    raise GenerationExhaustedError(
                        attempts=consecutive_collisions,
                        generated=len(generated),
                        requested=how_many,
                    )
                continue

            consecutive_collisions = 0
            seen.add(code)
            generated.append(code)

        _LOGGER.debug(
            "generated %s codes for pattern %r with %s collisions",
            how_many,
            pattern,
            collisions,
        )
        return generated


def generate_codes(
    pattern: str, how_many: int = 1, options: GeneratorOptions | None = None
) -> list[str]:
    return CodeGenerator().generate_codes(pattern, how_many, options)


__all__ = [
    GenerationExhaustedError.__name__,
    random_chars.__name__,
    CodeGenerator.__name__,
    generate_codes.__name__,
]
