"""
Module de gestion de la configuration du lecteur.

Ce module charge la configuration depuis les variables d'environnement
(éventuellement via un fichier .env) puis depuis un fichier YAML optionnel,
et valide les paramètres nécessaires au fonctionnement du lecteur.
"""

import yaml
import os
import logging
from dotenv import load_dotenv

from utils.constants import DEFAULT_CONFIG, ENV_PREFIX, VALID_LOG_LEVELS
from utils.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _env(name: str, default=None):
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_config() -> dict:
    """Build the default configuration, overridden by PLAYER_* variables."""
    config = DEFAULT_CONFIG.copy()

    if _env('LOG_LEVEL'):
        config['log_level'] = _env('LOG_LEVEL')
    if _env('LOG_DIR'):
        config['log_dir'] = _env('LOG_DIR')
    if _env('LOG_TO_FILE'):
        config['log_to_file'] = _parse_bool(_env('LOG_TO_FILE'))
    if _env('RESTART_THRESHOLD'):
        config['restart_threshold'] = _env('RESTART_THRESHOLD')
    if _env('SHUFFLE_SEED'):
        config['shuffle_seed'] = _env('SHUFFLE_SEED')
    if _env('DEBUG'):
        config['debug'] = _parse_bool(_env('DEBUG'))

    return config


def validate_config(config: dict) -> dict:
    """
    Normalise and validate a configuration dictionary.

    Args:
        config: Raw configuration (values may still be strings)

    Returns:
        dict: Configuration with typed values

    Raises:
        ConfigError: If a value cannot be used
    """
    config = dict(config)

    level = str(config.get('log_level', 'INFO')).upper()
    if config.get('debug'):
        level = 'DEBUG'
    if level not in VALID_LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {config.get('log_level')}")
    config['log_level'] = level

    try:
        threshold = float(config.get('restart_threshold'))
    except (TypeError, ValueError):
        raise ConfigError(f"restart_threshold must be a number, got {config.get('restart_threshold')!r}")
    if threshold < 0:
        raise ConfigError(f"restart_threshold must be >= 0, got {threshold}")
    config['restart_threshold'] = threshold

    seed = config.get('shuffle_seed')
    if seed is not None:
        try:
            config['shuffle_seed'] = int(seed)
        except (TypeError, ValueError):
            raise ConfigError(f"shuffle_seed must be an integer, got {seed!r}")

    config['log_to_file'] = _parse_bool(config.get('log_to_file', True))
    config['debug'] = _parse_bool(config.get('debug', False))
    return config


def load_config(config_path: str = None, env_path: str = None) -> dict:
    """
    Loads configuration from environment variables and an optional YAML file.

    The .env file (if any) is loaded first, PLAYER_* variables override the
    defaults, and keys from the YAML file override both.

    Args:
        config_path: Path to a YAML configuration file
        env_path: Path to a .env file, defaults to ./.env

    Returns:
        dict: Dictionary containing player configuration
    """
    env_path = env_path or os.path.join(os.getcwd(), '.env')
    if os.path.exists(env_path):
        logger.debug(f"Loading .env file from: {env_path}")
        load_dotenv(env_path)

    config = _env_config()

    config_path = config_path or _env('CONFIG')
    if config_path:
        if not os.path.exists(config_path):
            raise ConfigError(f"Configuration file not found: {config_path}")
        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                yaml_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}")
        if yaml_config is not None and not isinstance(yaml_config, dict):
            raise ConfigError(f"Configuration file {config_path} must contain a mapping")
        # Merge yaml config with defaults
        config = {**config, **(yaml_config or {})}
        logger.info(f"Loaded configuration from {config_path}")

    return validate_config(config)
