"""
Structured document (brief) generation.
"""
from .brief import BRIEF_SCHEMA, FALLBACK_BRIEF
from .concept import ConceptPrompt, ConceptPromptWriter, build_concept_context
from .generator import Error, Fallback, GenerationResult, Ok, StructuredGenerator
from .prompts import build_design_prompts
from .schema import FieldSpec, FieldType, SchemaDescriptor, repair

__all__ = [
    "BRIEF_SCHEMA",
    "FALLBACK_BRIEF",
    "ConceptPrompt",
    "ConceptPromptWriter",
    "build_concept_context",
    "Error",
    "Fallback",
    "GenerationResult",
    "Ok",
    "StructuredGenerator",
    "build_design_prompts",
    "FieldSpec",
    "FieldType",
    "SchemaDescriptor",
    "repair",
]
