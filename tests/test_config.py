"""Tests for rivet.config.json handling."""

import json

from rivet.config import CONFIG_FILE, RivetConfig


class TestRivetConfig:

    def test_defaults(self):
        config = RivetConfig()
        assert config.api_key is None
        assert config.commit_style is None
        assert config.to_dict() == {}

    def test_from_dict_ignores_unknown_and_blank(self):
        config = RivetConfig.from_dict({
            'model': ' gpt-4o ',
            'api_key': '',
            'colour': 'blue',
            'commit_style': 'emoji',
        })
        assert config.model == 'gpt-4o'
        assert config.api_key is None
        assert config.commit_style == 'emoji'

    def test_from_dict_drops_invalid_choices(self):
        config = RivetConfig.from_dict({'commit_style': 'haiku', 'backend': 'gemini'})
        assert config.commit_style is None
        assert config.backend is None

    def test_save_and_load(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        original = RivetConfig(backend='openai', default_base_branch='develop',
                               pr_system_prompt='Link the issue.')
        assert original.save(path) == path

        on_disk = json.loads(path.read_text())
        assert on_disk == {
            'backend': 'openai',
            'default_base_branch': 'develop',
            'pr_system_prompt': 'Link the issue.',
        }
        assert RivetConfig.load(path) == original

    def test_load_missing_file(self, tmp_path):
        assert RivetConfig.load(tmp_path / CONFIG_FILE) == RivetConfig()

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("{not json")
        assert RivetConfig.load(path) == RivetConfig()

    def test_load_non_object(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text('["model"]')
        assert RivetConfig.load(path) == RivetConfig()

    def test_env_overrides(self):
        config = RivetConfig(model='file-model', backend='anthropic')
        overridden = config.with_env_overrides({'RIVET_MODEL': 'env-model', 'RIVET_BACKEND': 'openai'})
        assert overridden.model == 'env-model'
        assert overridden.backend == 'openai'
        assert config.model == 'file-model'

    def test_env_override_ignores_unknown_backend(self):
        config = RivetConfig(backend='anthropic').with_env_overrides({'RIVET_BACKEND': 'gemini'})
        assert config.backend == 'anthropic'

    def test_no_env_returns_same(self):
        config = RivetConfig(model='m')
        assert config.with_env_overrides({}) is config
