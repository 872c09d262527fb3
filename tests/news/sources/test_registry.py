"""Tests for news source configuration loading."""

from pathlib import Path

import pytest

from newsdesk.news.models import NewsCategory
from newsdesk.news.sources.models import NewsSourcesConfig
from newsdesk.news.sources.registry import SourceRegistry, create_sources
from newsdesk.providers.config import NewsdeskSettings

CONFIG_YAML = """
version: "2.0"
country: gb
sources:
  - name: guardian
    priority: 1
  - name: newsapi
    priority: 2
    timeout_seconds: 4
  - name: gnews
    priority: 3
    enabled: false
  - name: reddit
    priority: 4
breaking:
  keywords: [breaking, alert]
  limit: 3
categories:
  sports: [match, goal]
  science: [lab]
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "news_sources.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


class TestSourceRegistry:
    """SourceRegistry loading."""

    def test_load(self, config_file):
        registry = SourceRegistry.load(config_file)

        assert registry.config.version == "2.0"
        assert [s.name for s in registry.enabled_sources] == ["guardian", "newsapi", "reddit"]
        assert registry.is_enabled("gnews") is False
        assert registry.breaking.keywords == ["breaking", "alert"]
        assert registry.breaking.limit == 3

    def test_category_table_keeps_file_order(self, config_file):
        table = SourceRegistry.load(config_file).category_keywords()
        assert list(table) == [NewsCategory.SPORTS, NewsCategory.SCIENCE]
        assert table[NewsCategory.SPORTS] == ["match", "goal"]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SourceRegistry.load(tmp_path / "missing.yaml")

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        registry = SourceRegistry.load_or_default(tmp_path / "missing.yaml")
        assert [s.name for s in registry.enabled_sources] == ["newsapi", "gnews", "guardian", "reddit"]

    @pytest.mark.parametrize("text", [
        "sources: [unclosed",
        "sources:\n  - name: myspace\n",
        "breaking:\n  limit: 50\n",
        "categories:\n  gardening: [roses]\n",
    ])
    def test_invalid_config_raises_value_error(self, tmp_path, text):
        path = tmp_path / "bad.yaml"
        path.write_text(text, encoding="utf-8")
        with pytest.raises(ValueError):
            SourceRegistry.load(path)

    def test_stats(self, config_file):
        stats = SourceRegistry.load(config_file).get_stats()

        assert stats["country"] == "gb"
        assert [s["name"] for s in stats["sources"]] == ["guardian", "newsapi", "gnews", "reddit"]
        assert stats["categories"] == ["sports", "science"]

    def test_shipped_config_is_valid(self):
        registry = SourceRegistry.load(Path("config/news_sources.yaml"))
        assert registry.enabled_sources
        assert NewsCategory.GENERAL not in registry.category_keywords()


class TestCreateSources:
    """create_sources."""

    def test_builds_chain_in_priority_order(self, config_file):
        registry = SourceRegistry.load(config_file)
        settings = NewsdeskSettings(guardian_api_key="g", news_api_key=None, request_timeout_seconds=7)

        sources = create_sources(registry, settings)

        assert [s.name for s in sources] == ["guardian", "newsapi", "reddit"]
        assert [s.priority for s in sources] == [1, 2, 4]
        assert [s.available for s in sources] == [True, False, True]
        assert sources[0].timeout == 7
        assert sources[1].timeout == 4
        assert sources[1].country == "gb"

    def test_default_config(self):
        sources = create_sources(SourceRegistry(NewsSourcesConfig()), NewsdeskSettings())
        assert [s.name for s in sources] == ["newsapi", "gnews", "guardian", "reddit"]
