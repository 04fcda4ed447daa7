from pathlib import Path

import pytest

from swagger_gen.config import GeneratorConfig, load_config
from swagger_gen.errors import ConfigurationError
from swagger_gen.generator.document import Generator
from swagger_gen.schema.document import SecurityType

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.yaml")
        assert config == GeneratorConfig()
        assert config.reflect_types is False

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == GeneratorConfig()

    def test_load_fixture(self):
        config = load_config(FIXTURES / "petstore.yaml")
        assert config.host == "petstore.swagger.io"
        assert config.base_path == "/api"
        assert config.schemes == ["https"]
        assert config.info.title == "Swagger Petstore"
        assert config.info.license.name == "MIT"
        assert config.security_definitions["BasicAuth"].type is SecurityType.BASIC_AUTH
        assert config.extensions == {"x-generator": "swagger-gen"}

    def test_swagger_field_names_are_accepted(self, tmp_path):
        path = tmp_path / "camel.yaml"
        path.write_text(
            "basePath: /v2\n"
            "info:\n  title: T\n  termsOfService: http://example.com/tos\n"
            "securityDefinitions:\n  Key:\n    type: apiKey\n    in: header\n    name: X-Key\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.base_path == "/v2"
        assert config.info.terms_of_service == "http://example.com/tos"
        assert config.security_definitions["Key"].in_ == "header"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("info: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="invalid YAML"):
            load_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_unknown_key_is_rejected(self, tmp_path):
        path = tmp_path / "typo.yaml"
        path.write_text("hostname: example.com\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="hostname"):
            load_config(path)

    def test_unknown_security_type_is_rejected(self, tmp_path):
        path = tmp_path / "sec.yaml"
        path.write_text("security_definitions:\n  X:\n    type: digest\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)


class TestFromConfig:
    def test_header_is_applied(self):
        gen = Generator.from_config(load_config(FIXTURES / "petstore.yaml"))
        doc = gen.document()
        assert doc.host == "petstore.swagger.io"
        assert doc.base_path == "/api"
        assert doc.schemes == ["https"]
        assert doc.info.title == "Swagger Petstore"
        assert list(doc.security_definitions) == ["BasicAuth"]
        assert doc.extensions == {"x-generator": "swagger-gen"}

    def test_default_schemes(self):
        gen = Generator.from_config(GeneratorConfig())
        assert gen.document().schemes == ["http", "https"]

    def test_config_info_is_copied(self):
        config = GeneratorConfig()
        gen = Generator.from_config(config)
        gen.set_info("Changed")
        assert config.info.title == ""

    def test_reflect_types(self):
        gen = Generator.from_config(GeneratorConfig(reflect_types=True))
        assert gen.reflect_types is True
        assert gen.synthesizer.reflect_types is True
