#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

# Configure logging
handler = logging.StreamHandler(sys.stderr) # Default to stderr
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[handler]
)
logger = logging.getLogger("librespot_setup")

CONFIG_ENV_VAR = 'LIBRESPOT_SETUP_CONFIG'
ENV_PREFIX = 'LIBRESPOT_SETUP_'


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. LIBRESPOT_SETUP_CONFIG environment variable
    2. ~/.librespot-setup/ directory
    """
    if CONFIG_ENV_VAR in os.environ:
        path = Path(os.environ[CONFIG_ENV_VAR])
        if path.exists():
            return path

    config_dir = Path.home() / '.librespot-setup'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    return config_dir / 'config.json'


def read_config_file(config_path):
    """Parse a JSON, TOML or YAML configuration file into a dict."""
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(config_path=None):
    """Load configuration from file.

    Args:
        config_path: Explicit file to read. Falls back to get_config_path().

    Returns:
        dict: defaults, merged with the file, then environment overrides.
    """
    config_path = Path(config_path) if config_path else get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            file_config = read_config_file(config_path)
            config = merge_configs(config, file_config)
            logger.debug(f"Loaded configuration from {config_path}")
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    temp_dir = "/tmp/librespot"
    raw_base = "https://raw.githubusercontent.com/dtcooper/raspotify/master/raspotify"
    return {
        "packages": ["git", "build-essential", "libasound2-dev", "pkg-config", "libpulse-dev"],
        "paths": {
            "temp_dir": temp_dir,
            "cargo_target": "",  # empty = <temp_dir>/target/release/librespot
            "unit_destination": "/lib/systemd/system/raspotify.service",
            "config_destination": "/etc/raspotify/conf",
            "binary_destination": "/usr/bin/librespot",
            "hook_destination": "/usr/lib/raspotify/onevent.sh"
        },
        "sources": {
            "repository": "https://github.com/librespot-org/librespot.git",
            "rustup": "https://sh.rustup.rs",
            "assets": {
                "unit": {
                    "url": f"{raw_base}/lib/systemd/system/raspotify.service",
                    "filename": "raspotify.service",
                    "sha256": ""
                },
                "config": {
                    "url": f"{raw_base}/etc/raspotify/conf",
                    "filename": "conf",
                    "sha256": ""
                },
                "hook": {
                    "url": f"{raw_base}/usr/lib/raspotify/onevent.sh",
                    "filename": "onevent.sh",
                    "sha256": ""
                }
            }
        },
        "build": {
            "features": ["alsa-backend", "pulseaudio-backend"],
            "default_features": False,
            "jobs": 0  # 0 = one job per available processor
        },
        "service": {
            "name": "raspotify"
        },
        "toolchain": {
            "cargo": "cargo",
            "cargo_home": "~/.cargo",
            "installer_args": ["-y"],
            "troubleshooting_url": "https://users.rust-lang.org/t/no-such-file-or-directory-os-error-2-cargo-or-rust-run/93465"
        },
        "apt": {
            "refresh_cache": False,
            "cache_path": "/var/cache/apt/pkgcache.bin",
            "cache_max_age_minutes": 60,
            "assume_yes": True
        },
        "git": {
            "update_checkout": False
        },
        "http": {
            "timeout_seconds": 30
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        }
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: LIBRESPOT_SETUP_SECTION_KEY
    For example: LIBRESPOT_SETUP_PATHS_TEMP_DIR=/var/tmp/librespot
    """
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX) or env_key == CONFIG_ENV_VAR:
            continue

        key_parts = env_key[len(ENV_PREFIX):].lower().split('_')

        if value.lower() in ('true', '1', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', '0', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that is a prefix of the remaining parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key:
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Env var is longer than the matched non-dict value
                    break
            else:
                break

    return config


def configure_logging(config, verbose=False):
    """Apply the configured log level and format."""
    logging_config = config.get("logging", {})
    level_name = "DEBUG" if verbose else str(logging_config.get("level", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    if logging_config.get("format"):
        handler.setFormatter(logging.Formatter(logging_config["format"]))
