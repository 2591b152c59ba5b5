from rakugaki.domain.errors import (
    AppError,
    InputValidationError,
    InvalidIdError,
    ModelError,
    NotFoundError,
    ParseError,
    ParseErrorKind,
    RateLimitExceeded,
    normalize_error,
)
from rakugaki.domain.evaluation import Artwork, Evaluation, PreviousWork, PriceChange

__all__ = [
    "AppError",
    "Artwork",
    "Evaluation",
    "InputValidationError",
    "InvalidIdError",
    "ModelError",
    "NotFoundError",
    "ParseError",
    "ParseErrorKind",
    "PreviousWork",
    "PriceChange",
    "RateLimitExceeded",
    "normalize_error",
]
