"""
Prompt templates for the generative backend.
"""
from .templates import (
    PromptTemplate,
    PromptLibrary,
)

__all__ = [
    'PromptTemplate',
    'PromptLibrary',
]
