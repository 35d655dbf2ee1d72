"""Shared fixtures for pagewright tests.

``write_docs`` lays out a documentation root from a mapping of relative
paths to file contents; ``sample_docs`` is a small versioned and localized
site used by the catalog, search, build, and CLI tests.
"""

from __future__ import annotations

import collections.abc as cabc
import textwrap
from pathlib import Path

import pytest

WriteDocs = cabc.Callable[[dict[str, str]], Path]

SAMPLE_CONFIG = """\
title: Acme Docs
description: Guides for the Acme toolkit
versions: [v2, v1]
default_version: v2
locales:
  en:
    label: English
    lang: en
  ja:
    label: 日本語
    lang: ja
default_locale: en
theme:
  nav:
    - text: Guide
      link: /guide/intro
  sidebar:
    /:
      - text: Getting started
        items:
          - text: Introduction
            link: /guide/intro
"""

SAMPLE_PAGES = {
    "index.md": """\
        ---
        title: Home
        description: Start here
        ---
        # Welcome

        Read the [introduction](guide/intro.md) first.

        ::: tip Heads up
        Install the toolkit before continuing.
        :::
        """,
    "guide/intro.md": """\
        ---
        title: Introduction
        ---
        # Introduction

        ## Install

        ::: tabs
        @tab pip
        ```bash
        pip install acme
        ```
        @tab uv
        ```bash
        uv add acme
        ```
        :::

        ## Configure

        ```mermaid
        graph TD; A-->B
        ```
        """,
    "v1/index.md": """\
        # Legacy release

        Configure the legacy toolkit.
        """,
    "ja/index.md": """\
        ---
        title: ホーム
        ---
        # ようこそ
        """,
    "_draft.md": "# Draft\n",
}


@pytest.fixture
def write_docs(tmp_path: Path) -> WriteDocs:
    """Return a helper that writes dedented files beneath ``tmp_path/docs``."""
    root = tmp_path / "docs"

    def _write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content), encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _write


@pytest.fixture
def sample_docs(write_docs: WriteDocs) -> Path:
    """Return a documentation root with versions, locales, and a draft page."""
    return write_docs({**SAMPLE_PAGES, ".pagewright/config.yaml": SAMPLE_CONFIG})
