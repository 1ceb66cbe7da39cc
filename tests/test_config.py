"""
Unit tests for librespot_setup.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

from librespot_setup.config import (
    load_config,
    get_config_path,
    get_default_config,
    merge_configs,
    apply_env_overrides,
    configure_logging,
    handler,
    logger,
)
from librespot_setup.domain.plan import InstallerConfig


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {'HOME': self.temp_dir}, clear=False)
        self.env.start()
        for key in list(os.environ):
            if key.startswith('LIBRESPOT_SETUP_'):
                del os.environ[key]

    def tearDown(self):
        """Clean up test environment"""
        self.env.stop()
        shutil.rmtree(self.temp_dir)

    def write_config(self, filename, content):
        config_dir = Path(self.temp_dir) / '.librespot-setup'
        config_dir.mkdir(exist_ok=True)
        path = config_dir / filename
        path.write_text(content)
        return path

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertEqual(
            config['packages'],
            ['git', 'build-essential', 'libasound2-dev', 'pkg-config', 'libpulse-dev']
        )
        self.assertEqual(config['paths']['temp_dir'], '/tmp/librespot')
        self.assertEqual(config['paths']['cargo_target'], '')
        self.assertEqual(config['sources']['repository'], 'https://github.com/librespot-org/librespot.git')
        self.assertEqual(set(config['sources']['assets']), {'unit', 'config', 'hook'})
        self.assertEqual(config['build']['features'], ['alsa-backend', 'pulseaudio-backend'])
        self.assertFalse(config['build']['default_features'])
        self.assertFalse(config['git']['update_checkout'])
        self.assertFalse(config['apt']['refresh_cache'])

    def test_default_asset_urls_are_https(self):
        """Test every default download uses HTTPS"""
        config = get_default_config()
        for asset in config['sources']['assets'].values():
            self.assertTrue(asset['url'].startswith('https://'))

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        config = load_config()
        self.assertEqual(config, get_default_config())

    def test_load_config_json_file(self):
        """Test loading config from JSON file"""
        self.write_config('config.json', json.dumps({
            'service': {'name': 'librespot'},
            'paths': {'temp_dir': '/var/tmp/librespot'},
        }))

        config = load_config()

        self.assertEqual(config['service']['name'], 'librespot')
        self.assertEqual(config['paths']['temp_dir'], '/var/tmp/librespot')
        # Untouched keys keep their defaults
        self.assertEqual(config['paths']['binary_destination'], '/usr/bin/librespot')

    def test_load_config_toml_file(self):
        """Test loading config from TOML file"""
        self.write_config('config.toml', '[build]\njobs = 2\nfeatures = ["alsa-backend"]\n')

        config = load_config()

        self.assertEqual(config['build']['jobs'], 2)
        self.assertEqual(config['build']['features'], ['alsa-backend'])

    def test_load_config_yaml_file(self):
        """Test loading config from YAML file"""
        self.write_config('config.yaml', 'git:\n  update_checkout: true\n')

        config = load_config()

        self.assertTrue(config['git']['update_checkout'])

    def test_load_config_explicit_path(self):
        """Test an explicit path wins over the home directory"""
        self.write_config('config.json', json.dumps({'service': {'name': 'from-home'}}))
        explicit = Path(self.temp_dir) / 'explicit.json'
        explicit.write_text(json.dumps({'service': {'name': 'explicit'}}))

        config = load_config(explicit)

        self.assertEqual(config['service']['name'], 'explicit')

    def test_load_config_invalid_file_falls_back_to_defaults(self):
        """Test a broken file is logged and ignored"""
        self.write_config('config.json', '{"service": not json at all}')

        with self.assertLogs('librespot_setup', level='ERROR'):
            config = load_config()

        self.assertEqual(config['service']['name'], 'raspotify')

    def test_config_path_env_var(self):
        """Test LIBRESPOT_SETUP_CONFIG selects the file"""
        path = Path(self.temp_dir) / 'custom.yml'
        path.write_text('service:\n  name: custom\n')
        os.environ['LIBRESPOT_SETUP_CONFIG'] = str(path)

        self.assertEqual(get_config_path(), path)
        self.assertEqual(load_config()['service']['name'], 'custom')

    def test_config_path_default(self):
        """Test the default path when nothing exists"""
        self.assertEqual(
            get_config_path(),
            Path(self.temp_dir) / '.librespot-setup' / 'config.json'
        )

    def test_temp_dir_override_moves_build_output(self):
        """Test the cargo artifact follows an overridden temp dir"""
        with patch.dict(os.environ, {'LIBRESPOT_SETUP_PATHS_TEMP_DIR': '/var/tmp/librespot'}):
            plan = InstallerConfig.from_dict(load_config())

        self.assertEqual(plan.paths.temp_dir, Path('/var/tmp/librespot'))
        self.assertEqual(plan.paths.cargo_target, Path('/var/tmp/librespot/target/release/librespot'))

    def test_temp_dir_in_config_file_moves_build_output(self):
        path = self.write_config('config.yaml', 'paths:\n  temp_dir: /srv/librespot\n')

        plan = InstallerConfig.from_dict(load_config(path))

        self.assertTrue(plan.paths.cargo_target.is_relative_to(plan.paths.temp_dir))

    def test_list_keys_from_env(self):
        """Test whitespace-separated env values become lists, not characters"""
        env = {
            'LIBRESPOT_SETUP_PACKAGES': 'git',
            'LIBRESPOT_SETUP_BUILD_FEATURES': 'alsa-backend rodio-backend',
            'LIBRESPOT_SETUP_TOOLCHAIN_INSTALLER_ARGS': '-y --profile minimal',
        }
        with patch.dict(os.environ, env):
            plan = InstallerConfig.from_dict(load_config())

        self.assertEqual(plan.packages, ('git',))
        self.assertEqual(plan.build.features, ('alsa-backend', 'rodio-backend'))
        self.assertEqual(plan.toolchain.installer_args, ('-y', '--profile', 'minimal'))


class TestConfigHelpers(unittest.TestCase):
    """Test merge and environment override helpers"""

    def test_merge_configs_nested(self):
        base = {'a': {'b': 1, 'c': 2}, 'd': [1]}
        merged = merge_configs(base, {'a': {'c': 3}, 'd': [2]})

        self.assertEqual(merged, {'a': {'b': 1, 'c': 3}, 'd': [2]})
        self.assertEqual(base['a']['c'], 2)

    def test_env_override_multi_word_keys(self):
        config = get_default_config()
        with patch.dict(os.environ, {'LIBRESPOT_SETUP_PATHS_TEMP_DIR': '/srv/librespot'}):
            config = apply_env_overrides(config)

        self.assertEqual(config['paths']['temp_dir'], '/srv/librespot')

    def test_env_override_typed_values(self):
        config = get_default_config()
        env = {
            'LIBRESPOT_SETUP_GIT_UPDATE_CHECKOUT': 'yes',
            'LIBRESPOT_SETUP_APT_CACHE_MAX_AGE_MINUTES': '15',
        }
        with patch.dict(os.environ, env):
            config = apply_env_overrides(config)

        self.assertIs(config['git']['update_checkout'], True)
        self.assertEqual(config['apt']['cache_max_age_minutes'], 15)

    def test_env_override_nested_asset(self):
        config = get_default_config()
        url = 'https://example.com/conf'
        with patch.dict(os.environ, {'LIBRESPOT_SETUP_SOURCES_ASSETS_CONFIG_URL': url}):
            config = apply_env_overrides(config)

        self.assertEqual(config['sources']['assets']['config']['url'], url)

    def test_env_override_unknown_key_ignored(self):
        config = get_default_config()
        with patch.dict(os.environ, {'LIBRESPOT_SETUP_NOPE_VALUE': 'x'}):
            config = apply_env_overrides(config)

        self.assertEqual(config, get_default_config())

    def test_configure_logging(self):
        original = logger.level
        try:
            configure_logging({'logging': {'level': 'warning'}})
            self.assertEqual(logger.level, logging.WARNING)
            configure_logging({'logging': {'level': 'warning'}}, verbose=True)
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            logger.setLevel(original)

    def test_configure_logging_format(self):
        original = handler.formatter
        record = logging.LogRecord('librespot_setup', logging.INFO, __file__, 1, 'Installing Rust', None, None)
        try:
            configure_logging({'logging': {'level': 'INFO', 'format': '[%(name)s] %(message)s'}})
            self.assertEqual(handler.format(record), '[librespot_setup] Installing Rust')
        finally:
            handler.setFormatter(original)


if __name__ == '__main__':
    unittest.main()
