from . import evaluate, works

__all__ = ["evaluate", "works"]
