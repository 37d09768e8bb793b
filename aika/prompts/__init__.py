"""Prompt templates for aika."""
from .template import PASSTHROUGH, PromptLibrary, PromptTemplate, interpolate

__all__ = ['PASSTHROUGH', 'PromptLibrary', 'PromptTemplate', 'interpolate']
