from rakugaki.infrastructure.llm.gemini_provider import GeminiVisionModel, GenerationParams, VisionModel

__all__ = ["GeminiVisionModel", "GenerationParams", "VisionModel"]
