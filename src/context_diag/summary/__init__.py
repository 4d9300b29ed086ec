"""Session summary: health classification, insights and suggestions."""

from .builder import build_session_summary
from .health import classify_health, worst_grade
from .insights import generate_insights
from .suggestions import SuggestionInput, generate_suggestions

__all__ = [
    "SuggestionInput",
    "build_session_summary",
    "classify_health",
    "generate_insights",
    "generate_suggestions",
    "worst_grade",
]
