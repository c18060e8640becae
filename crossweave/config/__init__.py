from .registry import ConfigRegistry, ParameterEntry, get_registry

__all__ = ["ConfigRegistry", "ParameterEntry", "get_registry"]
