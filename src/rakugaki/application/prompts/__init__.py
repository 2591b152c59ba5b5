from rakugaki.application.prompts.registry import PromptRegistry, PromptTemplate, RenderedPrompt

__all__ = ["PromptRegistry", "PromptTemplate", "RenderedPrompt"]
