from pathlib import Path

import pytest
from typer.testing import CliRunner

from assetfs.cli import app

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "html/js").mkdir(parents=True)
    (tmp_path / "html/index.html").write_bytes(b"<h1>hi</h1>")
    (tmp_path / "html/js/main.js").write_bytes(b"console.log(1);\n")
    (tmp_path / "html/js/main.js.map").write_bytes(b"{}")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _embed(*extra: str):
    return runner.invoke(
        app,
        ["embed", "html", "-o", "gen_assets.py", "--strip-prefix", "html", *extra],
    )


def test_embed_writes_module(project):
    result = _embed("--ignore", r"\.map$", "--modtime", "1465377937")
    assert result.exit_code == 0, result.output
    assert "2 assets" in result.output
    source = (project / "gen_assets.py").read_text(encoding="utf-8")
    assert 'path="/js/main.js",' in source
    assert "main.js.map" not in source
    assert "mod_time=1465377937," in source


def test_embed_uses_config(project):
    (project / "assetfs.toml").write_text(
        'sources = ["html"]\noutput = "from_config.py"\nstrip_prefix = "html"\n',
        encoding="utf-8",
    )
    result = runner.invoke(app, ["embed"])
    assert result.exit_code == 0, result.output
    assert (project / "from_config.py").exists()


def test_embed_empty_strip_prefix_overrides_config(project):
    (project / "assetfs.toml").write_text(
        'sources = ["html"]\noutput = "from_config.py"\nstrip_prefix = "html"\n',
        encoding="utf-8",
    )
    result = runner.invoke(app, ["embed", "--strip-prefix", ""])
    assert result.exit_code == 0, result.output
    source = (project / "from_config.py").read_text(encoding="utf-8")
    assert 'path="/html/js/main.js",' in source


def test_embed_requires_sources(project):
    result = runner.invoke(app, ["embed", "-o", "x.py"])
    assert result.exit_code == 1
    assert "no sources" in result.output


def test_embed_bad_config(project):
    (project / "assetfs.toml").write_text("bogus = 1\n", encoding="utf-8")
    result = runner.invoke(app, ["embed", "html", "-o", "x.py"])
    assert result.exit_code == 1
    assert "unknown keys" in result.output


def test_ls(project):
    assert _embed().exit_code == 0
    result = runner.invoke(app, ["ls", "gen_assets.py"])
    assert result.exit_code == 0, result.output
    assert "/index.html" in result.output
    assert "3 assets" in result.output


def test_cat_embedded_and_local(project):
    assert _embed().exit_code == 0
    result = runner.invoke(app, ["cat", "gen_assets.py", "/js/main.js"])
    assert result.exit_code == 0
    assert result.stdout_bytes == b"console.log(1);\n"

    (project / "html/js/main.js").write_bytes(b"changed();\n")
    result = runner.invoke(app, ["cat", "gen_assets.py", "/js/main.js", "--local"])
    assert result.stdout_bytes == b"changed();\n"


def test_cat_not_found(project):
    assert _embed().exit_code == 0
    result = runner.invoke(app, ["cat", "gen_assets.py", "/does/not/exist.js"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_verify(project):
    assert _embed().exit_code == 0
    result = runner.invoke(app, ["verify", "gen_assets.py", "--local"])
    assert result.exit_code == 0, result.output
    assert "PASS: /js/main.js" in result.output

    (project / "html/index.html").write_bytes(b"<h1>changed</h1>")
    result = runner.invoke(app, ["verify", "gen_assets.py", "--local"])
    assert result.exit_code == 1
    assert "FAIL: /index.html differs" in result.output


def test_verify_detects_corruption(project):
    (project / "broken_assets.py").write_text(
        "from assetfs import AssetBundle, AssetRecord\n"
        "bundle = AssetBundle([\n"
        "    AssetRecord(path='/a.js', local_path='a.js', size=5, mod_time=0, payload='%%%'),\n"
        "])\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["verify", "broken_assets.py"])
    assert result.exit_code == 1
    assert "FAIL: /a.js" in result.output


def test_unknown_module(project):
    result = runner.invoke(app, ["ls", "missing_assets.py"])
    assert result.exit_code == 1
    assert "not found" in result.output
