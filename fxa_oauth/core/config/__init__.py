from fxa_oauth.core.config.config import Config
from fxa_oauth.core.config.schema import ConfigSchema, EnvVarSpec
from fxa_oauth.core.config.validation import ConfigError, load_env_var, parse_bool

__all__ = [
    "Config",
    "ConfigError",
    "ConfigSchema",
    "EnvVarSpec",
    "load_env_var",
    "parse_bool",
]
