import pytest

from nhxtree.config import ParserConfig


def test_defaults():
    config = ParserConfig()
    assert config.context_radius == 20
    assert config.token_preview_length == 20
    assert config.allow_trailing_input is False
    assert config.logger_name == "nhxtree.parser"


def test_from_env(monkeypatch):
    monkeypatch.setenv("NHXTREE_CONTEXT_RADIUS", "5")
    monkeypatch.setenv("NHXTREE_TOKEN_PREVIEW", "3")
    monkeypatch.setenv("NHXTREE_ALLOW_TRAILING", "1")
    config = ParserConfig.from_env()
    assert config == ParserConfig(
        context_radius=5, token_preview_length=3, allow_trailing_input=True
    )


def test_from_env_without_variables(monkeypatch):
    for name in ("NHXTREE_CONTEXT_RADIUS", "NHXTREE_TOKEN_PREVIEW", "NHXTREE_ALLOW_TRAILING"):
        monkeypatch.delenv(name, raising=False)
    assert ParserConfig.from_env() == ParserConfig()


def test_from_env_rejects_bad_numbers(monkeypatch):
    monkeypatch.setenv("NHXTREE_CONTEXT_RADIUS", "wide")
    with pytest.raises(ValueError):
        ParserConfig.from_env()


@pytest.mark.parametrize(
    "kwargs", [{"context_radius": -1}, {"token_preview_length": 0}]
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        ParserConfig(**kwargs)


def test_config_is_frozen():
    with pytest.raises(AttributeError):
        ParserConfig().context_radius = 3
