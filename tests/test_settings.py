"""Tests for PlainsiteSettings."""

import json
from pathlib import Path

import pytest
import yaml

from plainsite_pkg.settings import PlainsiteSettings


class TestPlainsiteSettings:
    """Test cases for configuration loading."""

    def test_defaults_without_config(self, temp_dir):
        settings = PlainsiteSettings(temp_dir).load_settings()
        assert settings == PlainsiteSettings.DEFAULT_SETTINGS

    def test_load_yaml(self, temp_dir):
        Path(temp_dir, 'plainsite.yml').write_text("template: site.tpl\noutput: public\n")
        loader = PlainsiteSettings(temp_dir)
        settings = loader.load_settings()
        assert settings['template'] == 'site.tpl'
        assert settings['output'] == 'public'
        assert settings['content'] == 'content'
        assert loader.config_file_path.endswith('plainsite.yml')

    def test_load_json(self, temp_dir):
        Path(temp_dir, 'plainsite.json').write_text(json.dumps({'workers': 4}))
        assert PlainsiteSettings(temp_dir).load_settings()['workers'] == 4

    def test_yml_preferred_over_json(self, temp_dir):
        Path(temp_dir, 'plainsite.yml').write_text("output: from-yml\n")
        Path(temp_dir, 'plainsite.json').write_text(json.dumps({'output': 'from-json'}))
        assert PlainsiteSettings(temp_dir).load_settings()['output'] == 'from-yml'

    def test_empty_yaml(self, temp_dir):
        Path(temp_dir, 'plainsite.yaml').write_text("")
        assert PlainsiteSettings(temp_dir).load_settings() == PlainsiteSettings.DEFAULT_SETTINGS

    def test_invalid_yaml(self, temp_dir):
        Path(temp_dir, 'plainsite.yml').write_text("output: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            PlainsiteSettings(temp_dir).load_settings()

    def test_invalid_json(self, temp_dir):
        Path(temp_dir, 'plainsite.json').write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            PlainsiteSettings(temp_dir).load_settings()

    def test_non_mapping_config(self, temp_dir):
        Path(temp_dir, 'plainsite.yml').write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            PlainsiteSettings(temp_dir).load_settings()

    def test_merge_with_args(self, temp_dir):
        Path(temp_dir, 'plainsite.yml').write_text("output: public\ntemplate: site.tpl\n")
        loader = PlainsiteSettings(temp_dir)
        loader.load_settings()
        merged = loader.merge_with_args({
            'output': 'dist',
            'template': None,
            'content_extensions': '.md, .txt,',
        })
        assert merged['output'] == 'dist'
        assert merged['template'] == 'site.tpl'
        assert merged['content_extensions'] == ['.md', '.txt']

    @pytest.mark.parametrize("file_format", ['yml', 'yaml'])
    def test_create_sample_yaml_config(self, temp_dir, file_format):
        path = PlainsiteSettings(temp_dir).create_sample_config(file_format)
        assert path.endswith(f'plainsite.{file_format}')
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f)
        assert data['template'] == 'template.tpl'
        assert data['content_extensions'] == ['.md', '.txt', '.html']
        assert data['workers'] is None

    def test_create_sample_json_config(self, temp_dir):
        path = PlainsiteSettings(temp_dir).create_sample_config('json')
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        assert data['assets'] == 'assets'
        assert set(data) == set(PlainsiteSettings.DEFAULT_SETTINGS)

    def test_sample_config_round_trips(self, temp_dir):
        PlainsiteSettings(temp_dir).create_sample_config('yml')
        settings = PlainsiteSettings(temp_dir).load_settings()
        assert settings['parallel_threshold'] == 12
        assert settings['assets'] == 'assets'

    def test_unsupported_sample_format(self, temp_dir):
        with pytest.raises(ValueError):
            PlainsiteSettings(temp_dir).create_sample_config('toml')
