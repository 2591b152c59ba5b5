from rakugaki.application.services.critique_service import CritiqueService
from rakugaki.application.services.fallback_generator import generate_fallback
from rakugaki.application.services.response_parser import parse_evaluation

__all__ = [
    "CritiqueService",
    "generate_fallback",
    "parse_evaluation",
]
