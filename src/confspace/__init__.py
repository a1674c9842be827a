"""Configuration space generator: expand parameter specs into concrete configurations."""

from .compiler import compile_configurations
from .configuration import Configuration
from .errors import ConfigErrorCode, ConfigurationError, InternalInvariantError
from .loader import generate, generate_from_file, load_spec, parse_spec_mapping
from .models import Action, GenerationCondition, GenerationSpec, ParamValue, ValueBinding

__all__ = [
    "Action",
    "Configuration",
    "ConfigErrorCode",
    "ConfigurationError",
    "GenerationCondition",
    "GenerationSpec",
    "InternalInvariantError",
    "ParamValue",
    "ValueBinding",
    "compile_configurations",
    "generate",
    "generate_from_file",
    "load_spec",
    "parse_spec_mapping",
]
