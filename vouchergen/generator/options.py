from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_ALPHANUMERIC_CHARS = "123456789ABCDEFGHJKLMNPQRSTUVWXYZ"
DEFAULT_NUMERIC_CHARS = "0123456789"

ExistingCodesLoader = Callable[[str], Iterable[str]]


def _no_existing_codes(pattern: str) -> set[str]:
    return set()


class GeneratorOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    alphanumeric_chars: str = DEFAULT_ALPHANUMERIC_CHARS
    numeric_chars: str = DEFAULT_NUMERIC_CHARS
    sparsity: float = Field(default=1.0, allow_inf_nan=False)
    existing_codes_loader: ExistingCodesLoader = _no_existing_codes

    alphanumeric_placeholder: str = "*"
    numeric_placeholder: str = "#"
    variable_suffix: str = "+"

    # consecutive collisions tolerated before giving up, None retries forever
    max_attempts: int | None = None

    @field_validator("alphanumeric_chars", "numeric_chars")
    @classmethod
    def _check_alphabet(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("alphabet needs at least two characters")
        if len(set(value)) != len(value):
            raise ValueError("alphabet characters must be distinct")
        return value

    @field_validator("sparsity")
    @classmethod
    def _clamp_sparsity(cls, value: float) -> float:
        return max(value, 1.0)

    @field_validator(
        "alphanumeric_placeholder", "numeric_placeholder", "variable_suffix"
    )
    @classmethod
    def _check_placeholder_char(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("placeholder must be a single character")
        return value

    @field_validator("max_attempts")
    @classmethod
    def _check_max_attempts(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("max_attempts must be positive")
        return value

    @model_validator(mode="after")
    def _check_distinct_placeholders(self) -> "GeneratorOptions":
        chars = {
            self.alphanumeric_placeholder,
            self.numeric_placeholder,
            self.variable_suffix,
        }
        if len(chars) != 3:
            raise ValueError("placeholder characters must be distinct")
        return self

    def copy_with(self, **changes: Any) -> "GeneratorOptions":
        """
        Returns a validated copy with `changes` applied.
        """
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self)(**values)

    def load_existing_codes(self, pattern: str) -> set[str]:
        return set(self.existing_codes_loader(pattern))


__all__ = [
    "DEFAULT_ALPHANUMERIC_CHARS",
    "DEFAULT_NUMERIC_CHARS",
    "ExistingCodesLoader",
    GeneratorOptions.__name__,
]
