# Workflow package imports - available for building and rendering workflows
from .ast import *  # noqa: F401, F403
from .contexts import GITHUB_CONTEXT_KEYS
from .serializer import render, to_json, to_yaml
from .steps_builder import DefaultStepsBuilder, StepsBuilder

__all__ = [
    "GITHUB_CONTEXT_KEYS",
    "render",
    "to_json",
    "to_yaml",
    "DefaultStepsBuilder",
    "StepsBuilder",
]
