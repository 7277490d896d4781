"""Prompt templates and bundled study material."""
from studybase.prompts.classifier_prompt import ClassifierPrompt
from studybase.prompts.sample_material import SAMPLE_MATERIAL

__all__ = [
    "ClassifierPrompt",
    "SAMPLE_MATERIAL",
]
