"""Tests for the packaged model catalogs."""

import pytest

from agentstack.catalog import ModelCatalogEntry, get_model_catalog
from agentstack.config import AppConfig
from agentstack.llm import ModelNotFoundError


@pytest.mark.parametrize("platform", ["anthropic", "gemini", "ollama", "chatgpt"])
def test_each_platform_has_models(platform):
    catalog = get_model_catalog(platform)
    assert catalog.platform == platform
    assert len(catalog) > 0
    assert all(isinstance(entry, ModelCatalogEntry) for entry in catalog.get_models().values())


def test_unknown_platform_uses_openai_catalog():
    catalog = get_model_catalog("unknown-xyz")
    assert catalog.platform == "chatgpt"
    assert "gpt-4o" in catalog


def test_get_model_and_missing_model():
    catalog = get_model_catalog("anthropic")
    assert catalog.get_model("claude-sonnet-4-5").description == "Claude Sonnet 4.5"
    with pytest.raises(ModelNotFoundError):
        catalog.get_model("gpt-4o")


def test_catalog_is_rebuilt_each_call():
    first = get_model_catalog("gemini")
    models = first.get_models()
    models.clear()

    assert len(get_model_catalog("gemini")) > 0
    assert len(first) > 0


def test_configured_models_are_appended_without_overriding():
    config = AppConfig()
    config.catalog = {"ollama": {"phi4": "Microsoft Phi-4", "mistral": "Renamed"}}

    catalog = get_model_catalog("ollama", config)

    assert catalog.get_model("phi4").description == "Microsoft Phi-4"
    assert catalog.get_model("mistral").description == "Mistral 7B"
    assert list(catalog.get_models())[-1] == "phi4"
