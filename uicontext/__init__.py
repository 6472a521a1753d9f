"""Static component map and preview data for TSX applications."""

from .analyzer import ContextAnalyzer
from .config import AnalyzerConfig, load_config
from .models import ComponentRecord, ContextApp, HookCall, MarkupReference, PropDescriptor
from .synth import MockValueSynthesizer, generate_props_data

__all__ = [
    "AnalyzerConfig",
    "ComponentRecord",
    "ContextAnalyzer",
    "ContextApp",
    "HookCall",
    "MarkupReference",
    "MockValueSynthesizer",
    "PropDescriptor",
    "generate_props_data",
    "load_config",
]
