import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import ValidationError

from ..generator import (
    CapacityError,
    CodeGenerator,
    GenerationExhaustedError,
    GeneratorOptions,
    plan_capacity,
)
from .models import (
    CodesResponse,
    ErrorPayload,
    GenerateCodesRequest,
    PatternRequest,
    PlanResponse,
)
from .registry import IssuedCodeRegistry, get_code_registry

__all__ = ["router"]

_LOGGER = logging.getLogger(__name__)

# consecutive collisions tolerated per request before answering 503
MAX_ATTEMPTS = 10_000

router = APIRouter(prefix="/codes", tags=["codes"])


def _build_options(
    request: PatternRequest, registry: IssuedCodeRegistry
) -> GeneratorOptions:
    try:
        return GeneratorOptions(
            existing_codes_loader=registry.get_codes,
            max_attempts=MAX_ATTEMPTS,
            **request.get_option_overrides(),
        )
    except ValidationError as exc:
        # inputs may be NaN or infinity, which can't be rendered as JSON
        errors = exc.errors(
            include_url=False, include_context=False, include_input=False
        )
        payload = ErrorPayload(
            type="options:invalid",
            message="invalid generator options",
            extra={"errors": errors},
        )
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY, detail=payload.model_dump()
        )


def _capacity_exceeded(pattern: str, exc: CapacityError) -> HTTPException:
    _LOGGER.warning("capacity exceeded for pattern %r: %s", pattern, exc)
    return HTTPException(
        status.HTTP_409_CONFLICT,
        detail=ErrorPayload.capacity_exceeded(exc).model_dump(),
    )


@router.post(
    "",
    response_model=CodesResponse,
    responses={status.HTTP_409_CONFLICT: {}, status.HTTP_503_SERVICE_UNAVAILABLE: {}},
)
async def generate_codes(
    request: GenerateCodesRequest,
    *,
    registry: IssuedCodeRegistry = Depends(get_code_registry)
):
    options = _build_options(request, registry)
    try:
        codes = CodeGenerator().generate_codes(
            request.pattern, request.how_many, options
        )
    except CapacityError as exc:
        raise _capacity_exceeded(request.pattern, exc)
    except GenerationExhaustedError as exc:
        _LOGGER.warning(
            "generation exhausted for pattern %r: %s", request.pattern, exc
        )
        raise HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ErrorPayload.generation_exhausted(exc).model_dump(),
        )

    if request.remember:
        registry.add_codes(request.pattern, codes)
    _LOGGER.debug("issued %s codes for pattern %r", len(codes), request.pattern)
    return CodesResponse(pattern=request.pattern, codes=codes)


@router.post(
    "/plan",
    response_model=PlanResponse,
    responses={status.HTTP_409_CONFLICT: {}},
)
async def plan_codes(
    request: PatternRequest,
    *,
    registry: IssuedCodeRegistry = Depends(get_code_registry)
):
    options = _build_options(request, registry)
    existing = len(options.load_existing_codes(request.pattern))
    try:
        plan = plan_capacity(request.pattern, request.how_many, existing, options)
    except CapacityError as exc:
        raise _capacity_exceeded(request.pattern, exc)
    return PlanResponse(**plan.model_dump(), existing=existing)


@router.get("/issued", response_model=CodesResponse)
async def get_issued_codes(
    pattern: str = Query(min_length=1),
    *,
    registry: IssuedCodeRegistry = Depends(get_code_registry)
):
    return CodesResponse(pattern=pattern, codes=sorted(registry.get_codes(pattern)))


@router.delete("/issued", status_code=status.HTTP_204_NO_CONTENT)
async def forget_issued_codes(
    pattern: str = Query(min_length=1),
    *,
    registry: IssuedCodeRegistry = Depends(get_code_registry)
):
    forgotten = registry.forget(pattern)
    _LOGGER.debug("forgot %s codes for pattern %r", forgotten, pattern)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
