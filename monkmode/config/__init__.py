from .config import load_config, session_config_from, validate_config

__all__ = ["load_config", "session_config_from", "validate_config"]
