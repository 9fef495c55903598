from pathlib import Path

import pytest

from assetfs.config import EmbedConfig, load_config
from assetfs.errors import ConfigError


def test_defaults_without_files(tmp_path: Path):
    assert load_config(root=tmp_path) == EmbedConfig()


def test_assetfs_toml(tmp_path: Path):
    (tmp_path / "assetfs.toml").write_text(
        'sources = ["html"]\noutput = "app/assets.py"\nstrip_prefix = "html"\n'
        'ignore = "\\\\.map$"\nmod_time = 1465377937\n',
        encoding="utf-8",
    )
    cfg = load_config(root=tmp_path)
    assert cfg.sources == ["html"]
    assert cfg.output == "app/assets.py"
    assert cfg.strip_prefix == "html"
    assert cfg.ignore == r"\.map$"
    assert cfg.mod_time == 1465377937


def test_pyproject_table(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "x"\n\n[tool.assetfs]\nsources = "static"\noutput = "a.py"\n',
        encoding="utf-8",
    )
    cfg = load_config(root=tmp_path)
    assert cfg.sources == ["static"]
    assert cfg.output == "a.py"


def test_pyproject_without_table(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    assert load_config(root=tmp_path) == EmbedConfig()


def test_explicit_path(tmp_path: Path):
    path = tmp_path / "custom.toml"
    path.write_text('output = "b.py"\n', encoding="utf-8")
    assert load_config(path).output == "b.py"


@pytest.mark.parametrize(
    "body",
    [
        'unknown = 1\n',
        'sources = [1, 2]\n',
        'mod_time = "yesterday"\n',
        'mod_time = true\n',
        'output = 3\n',
        'sources = [\n',
    ],
)
def test_invalid_config(tmp_path: Path, body: str):
    path = tmp_path / "assetfs.toml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_explicit_path(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.toml")


def test_merged_overrides():
    cfg = EmbedConfig(sources=["html"], output="a.py", strip_prefix="html")
    merged = cfg.merged(sources=None, output="b.py", strip_prefix="", mod_time=5)
    assert merged.sources == ["html"]
    assert merged.output == "b.py"
    assert merged.strip_prefix == ""
    assert cfg.merged(strip_prefix=None).strip_prefix == "html"
    assert cfg.merged(sources=[]).sources == []
    assert merged.mod_time == 5
    with pytest.raises(ConfigError):
        cfg.merged(nope=1)
