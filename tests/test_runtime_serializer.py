"""Run ``runtime.js``'s serializer under Node against the Python renderer.

The client mounts a page by serializing its embedded element tree and
comparing the result with the prerendered ``#app`` markup, so the two
serializers must agree byte for byte. The runtime is loaded the way the
client bundle loads it, as a ``function (exports, require)`` body, with a
document stub that makes its start-up hook return immediately.
"""

from __future__ import annotations

import json
import shutil
import subprocess
import typing as typ

import pytest

from pagewright.build.entries import ClientEntryModule
from pagewright.bundler import BuildTarget
from pagewright.catalog import build_catalog
from pagewright.config import load_site_config
from pagewright.generator import (
    ContentRenderer,
    RawHtml,
    build_app_tree,
    build_page_data,
    from_data,
    h,
    render_html,
    to_data,
)
from pagewright.generator.shell import build_search_dialog

if typ.TYPE_CHECKING:
    from pathlib import Path

NODE = shutil.which("node")

pytestmark = pytest.mark.skipif(NODE is None, reason="node is not installed")

HARNESS = """
const payload = JSON.parse(require("fs").readFileSync(0, "utf8"));
globalThis.document = { readyState: "complete", getElementById: () => null };
const runtime = {};
new Function("exports", "require", payload.source)(runtime, () => ({}));
process.stdout.write(JSON.stringify(payload.trees.map(runtime.serialize)));
"""


def _serialize_with_node(trees: list[typ.Any]) -> list[str]:
    source = ClientEntryModule().load(BuildTarget.CLIENT)
    completed = subprocess.run(  # noqa: S603
        [typ.cast("str", NODE), "-e", HARNESS],
        input=json.dumps({"source": source, "trees": trees}),
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=True,
    )
    return json.loads(completed.stdout)


def test_runtime_serializer_matches_render_html(sample_docs: Path) -> None:
    """Every sample page, the search dialog, and awkward text serialize alike."""
    config = load_site_config(sample_docs)
    renderer = ContentRenderer()
    trees = [
        to_data(build_app_tree(build_page_data(route, config, renderer), config))
        for route in build_catalog(sample_docs)
    ]
    trees.append(to_data(build_search_dialog()))
    trees.append(
        to_data(
            h(
                "p",
                {"title": "a \"b\" & 'c' <d>"},
                "x < y & z > w \"quoted\" 'single'",
                h("br"),
                h("img", {"src": "/logo.png", "alt": ""}),
                RawHtml("<em>kept & raw</em>"),
            )
        )
    )

    expected = [render_html(from_data(tree)) for tree in trees]
    assert _serialize_with_node(trees) == expected
