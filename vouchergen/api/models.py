from typing import Any

from pydantic import BaseModel, Field

from ..generator import CapacityError, CapacityPlan, GenerationExhaustedError

MAX_CODES_PER_REQUEST = 10_000


class ErrorPayload(BaseModel):
    type: str
    message: str | None
    extra: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def capacity_exceeded(cls, exc: CapacityError):
        return cls(
            type="capacity:exceeded",
            message=str(exc),
            extra={
                "requested": exc.requested,
                "maximum": exc.maximum,
                "existing": exc.existing,
                "sparsity": exc.sparsity,
            },
        )

    @classmethod
    def generation_exhausted(cls, exc: GenerationExhaustedError):
        return cls(
            type="generation:exhausted",
            message=str(exc),
            extra={"attempts": exc.attempts, "generated": exc.generated},
        )


class PatternRequest(BaseModel):
    pattern: str = Field(min_length=1)
    how_many: int = Field(default=1, ge=0, le=MAX_CODES_PER_REQUEST)
    sparsity: float | None = None
    numeric_chars: str | None = None
    alphanumeric_chars: str | None = None

    def get_option_overrides(self) -> dict[str, Any]:
        overrides = {
            "sparsity": self.sparsity,
            "numeric_chars": self.numeric_chars,
            "alphanumeric_chars": self.alphanumeric_chars,
        }
        return {key: value for key, value in overrides.items() if value is not None}


class GenerateCodesRequest(PatternRequest):
    remember: bool = True


class CodesResponse(BaseModel):
    pattern: str
    codes: list[str]


class PlanResponse(CapacityPlan):
    existing: int


__all__ = [
    ErrorPayload.__name__,
    PatternRequest.__name__,
    GenerateCodesRequest.__name__,
    CodesResponse.__name__,
    PlanResponse.__name__,
]
