"""Tests for the ``pagewright`` command functions.

The Cyclopts commands are plain functions, so the tests call them directly
and inspect what they print.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from pagewright import cli

if typ.TYPE_CHECKING:
    from .conftest import WriteDocs


def test_build_reports_written_pages(
    sample_docs: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A successful build lists each output and a rendered summary."""
    cli.build(sample_docs, site_url="https://docs.acme.dev")
    out = capsys.readouterr().out
    assert "rendered 4 of 4 pages" in out
    assert "index.html" in out
    assert "sitemap.xml" in out
    assert "llms.txt" in out
    dist = sample_docs / ".pagewright" / "dist"
    assert (dist / "guide" / "intro" / "index.html").is_file()
    assert "https://docs.acme.dev/guide/intro" in (dist / "sitemap.xml").read_text(
        encoding="utf-8"
    )


def test_build_skips_optional_outputs(
    sample_docs: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Skip flags disable the sitemap and llms files; out_dir may be absolute."""
    out_dir = tmp_path / "site"
    cli.build(sample_docs, out_dir=out_dir, skip_llms=True, skip_sitemap=True)
    capsys.readouterr()
    assert (out_dir / "index.html").is_file()
    assert not (out_dir / "sitemap.xml").exists()
    assert not (out_dir / "llms.txt").exists()


def test_build_base_override(sample_docs: Path) -> None:
    """``--base`` overrides the configured base for asset URLs."""
    cli.build(sample_docs, base="handbook", skip_llms=True, skip_sitemap=True)
    html = (sample_docs / ".pagewright" / "dist" / "index.html").read_text(encoding="utf-8")
    assert 'src="/handbook/assets/app-' in html


def test_build_client_only(sample_docs: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``--skip-prerender`` publishes the client bundle only."""
    cli.build(sample_docs, skip_prerender=True, skip_llms=True, skip_sitemap=True)
    out = capsys.readouterr().out
    assert "(client bundle only)" in out
    assert "rendered" not in out


def test_build_fails_for_missing_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """A missing root exits with status 1 and an error on stderr."""
    with pytest.raises(SystemExit) as excinfo:
        cli.build(tmp_path / "absent")
    assert excinfo.value.code == 1
    assert "error: " in capsys.readouterr().err


def test_build_fails_for_duplicate_routes(
    write_docs: WriteDocs, capsys: pytest.CaptureFixture[str]
) -> None:
    """Duplicate routes abort the build before anything is written."""
    root = write_docs({"guide.md": "A\n", "guide/index.md": "B\n"})
    with pytest.raises(SystemExit):
        cli.build(root)
    assert "Duplicate route" in capsys.readouterr().err
    assert not (root / ".pagewright" / "dist").exists()


def test_build_refuses_root_as_output(
    sample_docs: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """An output directory equal to the root exits without deleting sources."""
    with pytest.raises(SystemExit) as excinfo:
        cli.build(sample_docs, out_dir=Path("."))
    assert excinfo.value.code == 1
    assert "contains the documentation root" in capsys.readouterr().err
    assert (sample_docs / "index.md").is_file()
    assert (sample_docs / "guide" / "intro.md").is_file()


def test_routes_lists_catalog(sample_docs: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Each route is printed with its source file and tags."""
    cli.routes(sample_docs)
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "/\tindex.md",
        "/guide/intro\tguide/intro.md",
        "/ja/\tja/index.md [ja]",
        "/v1/\tv1/index.md [v1]",
    ]


def test_search_prints_ranked_results(
    sample_docs: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Results are printed best first with an indented excerpt."""
    cli.search("configure", root=sample_docs)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split("\t")[:2] == ["1.00", "/guide/intro"]
    assert lines[1].startswith("\t")
    assert any(line.split("\t")[1] == "/v1/" for line in lines if not line.startswith("\t"))


def test_search_without_results(sample_docs: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """An unmatched query says so."""
    cli.search("kubernetes", root=sample_docs)
    assert capsys.readouterr().out.strip() == "no results"
