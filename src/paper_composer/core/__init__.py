"""
Paper Composer Core Package

Shared data models, schema validation, serialization and editing helpers.

**DESIGN NOTES:**

1. **Immutable Data Models**
   - Documents, sections and questions are frozen dataclasses
   - Edits create new instances; renderers only read

2. **Raw Fields, Derived Rendering Values**
   - Question number/marks/text are stored exactly as transcribed
   - Normalized values are derived at render time (text.normalizer)

3. **Explicit Script Profiles**
   - Direction, fonts and labels are selected once per document language
"""

from .models import ExamDocument, Section, Question, Language, HeaderTemplate, ScriptProfile, get_profile

__all__ = [
    "ExamDocument",
    "Section",
    "Question",
    "Language",
    "HeaderTemplate",
    "ScriptProfile",
    "get_profile",
]
