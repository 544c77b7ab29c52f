import importlib.metadata

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import api
from .generator import (
    CapacityError,
    CodeGenerator,
    GenerationExhaustedError,
    GeneratorOptions,
    generate_codes,
    random_chars,
)

PROJECT_NAME = "vouchergen"

try:
    VERSION = importlib.metadata.version(PROJECT_NAME)
except importlib.metadata.PackageNotFoundError:
    VERSION = "unknown"  # type: ignore

app = FastAPI(
    title="Voucher Code Generator",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api.router)

__all__ = [
    "app",
    "CapacityError",
    "CodeGenerator",
    "GenerationExhaustedError",
    "GeneratorOptions",
    "generate_codes",
    "random_chars",
]
