"""Profile loading, validation, templates and threshold resolution."""

from .loader import ProfileLoadError, load_profiles
from .matcher import MatchedProfile, get_effective_thresholds, match_profile, model_family
from .templates import TEMPLATES, get_template, template_names
from .validator import ProfileValidationResult, ProfileValidator

__all__ = [
    "TEMPLATES",
    "MatchedProfile",
    "ProfileLoadError",
    "ProfileValidationResult",
    "ProfileValidator",
    "get_effective_thresholds",
    "get_template",
    "load_profiles",
    "match_profile",
    "model_family",
    "template_names",
]
