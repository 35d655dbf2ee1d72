"""Bundler interface and the in-process bundler used by default.

The build orchestrator never assembles assets itself. It hands a
:class:`BundleRequest` (target, entry module id, plugins that resolve
synthetic modules) to a :class:`Bundler` and reads back what was written.
:class:`InProcessBundler` is a small implementation that needs no external
toolchain:

* the **client** target links every JavaScript module into one script with a
  tiny module registry, concatenates the stylesheets, names both after a
  content hash, and writes an ``index.html`` shell referencing them;
* the **server** target writes a single importable Python file holding the
  resolved modules plus the server entry source.

Example
-------
>>> from pathlib import Path
>>> from pagewright.bundler import BuildTarget, BundleRequest, InProcessBundler
>>> request = BundleRequest(BuildTarget.CLIENT, "entry", Path("out"))
>>> InProcessBundler().build(request)  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import enum
import hashlib
import json
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ._constants import APP_ROOT_ID, SERVER_ENTRY_FILENAME

logger = logging.getLogger(__name__)

JAVASCRIPT = "application/javascript"
STYLESHEET = "text/css"
PYTHON = "text/x-python"
JSON_DATA = "application/json"


class BuildTarget(enum.Enum):
    """Environment a bundle is produced for."""

    CLIENT = "client"
    SERVER = "server"


class ModulePlugin(typ.Protocol):
    """Resolve one synthetic module id to source text.

    ``load`` returns ``None`` when the module does not exist for a target.
    """

    module_id: str

    def media_type(self, target: BuildTarget) -> str:
        """Return the media type of the source produced for ``target``."""
        ...

    def load(self, target: BuildTarget) -> str | None:
        """Return the module source for ``target``."""
        ...


class BundleError(RuntimeError):
    """Raised when a bundle cannot be produced."""


@dc.dataclass(slots=True, frozen=True)
class BundleRequest:
    """Inputs for one bundler invocation."""

    target: BuildTarget
    entry: str
    out_dir: Path
    base: str = "/"
    plugins: tuple[ModulePlugin, ...] = ()


@dc.dataclass(slots=True, frozen=True)
class BundleOutput:
    """Files written by one bundler invocation.

    Attributes
    ----------
    out_dir : Path
        Directory the bundle was written to.
    files : tuple[Path, ...]
        Every written file.
    entry_file : Path
        The HTML shell for client builds, or the importable server module.
    """

    out_dir: Path
    files: tuple[Path, ...]
    entry_file: Path


class Bundler(typ.Protocol):
    """Anything able to turn a plugin graph into files on disk."""

    def build(self, request: BundleRequest) -> BundleOutput:
        """Produce the bundle described by ``request``."""
        ...


@dc.dataclass(slots=True, frozen=True)
class _Module:
    module_id: str
    media_type: str
    source: str


def _resolve_modules(request: BundleRequest) -> list[_Module]:
    modules: dict[str, _Module] = {}
    for plugin in request.plugins:
        if plugin.module_id in modules:
            msg = f"Module '{plugin.module_id}' is provided by more than one plugin."
            raise BundleError(msg)
        source = plugin.load(request.target)
        if source is None:
            continue
        modules[plugin.module_id] = _Module(
            plugin.module_id, plugin.media_type(request.target), source
        )
    if request.entry not in modules:
        msg = f"Entry module '{request.entry}' is not available for the {request.target.value} build."
        raise BundleError(msg)
    return [modules[key] for key in sorted(modules)]


def _content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:10]


def _link_scripts(modules: list[_Module], entry: str) -> str:
    """Wrap CommonJS-style module bodies in a self-contained registry."""
    parts = [
        "(function () {",
        '  "use strict";',
        "  var definitions = {};",
        "  var cache = {};",
        "  function require(id) {",
        "    if (Object.prototype.hasOwnProperty.call(cache, id)) {",
        "      return cache[id];",
        "    }",
        "    var definition = definitions[id];",
        "    if (!definition) {",
        '      throw new Error("Unknown module " + id);',
        "    }",
        "    var exports = {};",
        "    cache[id] = exports;",
        "    definition(exports, require);",
        "    return exports;",
        "  }",
    ]
    for module in modules:
        parts.append(f"  definitions[{json.dumps(module.module_id)}] = function (exports, require) {{")
        parts.append(module.source.rstrip("\n"))
        parts.append("  };")
    parts.append(f"  require({json.dumps(entry)});")
    parts.append("})();")
    return "\n".join(parts) + "\n"


class InProcessBundler:
    """Bundle synthetic modules without an external toolchain.

    Parameters
    ----------
    templates_dir : Path, optional
        Directory holding ``shell.jinja``. Defaults to the packaged templates.
    """

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("shell.jinja")

    def build(self, request: BundleRequest) -> BundleOutput:
        """Write the bundle for ``request`` and return what was written.

        Raises
        ------
        BundleError
            If the entry is missing, a module id is provided twice, or a
            module has a media type the target cannot link.
        """
        modules = _resolve_modules(request)
        request.out_dir.mkdir(parents=True, exist_ok=True)
        match request.target:
            case BuildTarget.CLIENT:
                output = self._build_client(request, modules)
            case BuildTarget.SERVER:
                output = self._build_server(request, modules)
        logger.debug(
            "Bundled %d modules for %s into %s",
            len(modules),
            request.target.value,
            request.out_dir,
        )
        return output

    def _build_client(self, request: BundleRequest, modules: list[_Module]) -> BundleOutput:
        scripts = [module for module in modules if module.media_type == JAVASCRIPT]
        styles = [module for module in modules if module.media_type == STYLESHEET]
        unsupported = [
            module.module_id for module in modules if module not in scripts and module not in styles
        ]
        if unsupported:
            msg = f"Client bundle cannot link modules {unsupported}."
            raise BundleError(msg)

        assets_dir = request.out_dir / "assets"
        assets_dir.mkdir(parents=True, exist_ok=True)
        files: list[Path] = []

        script_text = _link_scripts(scripts, request.entry)
        script_path = assets_dir / f"app-{_content_hash(script_text)}.js"
        script_path.write_text(script_text, encoding="utf-8")
        files.append(script_path)

        style_urls: list[str] = []
        style_text = "\n".join(module.source.rstrip("\n") for module in styles)
        if style_text.strip():
            style_path = assets_dir / f"style-{_content_hash(style_text)}.css"
            style_path.write_text(style_text + "\n", encoding="utf-8")
            files.append(style_path)
            style_urls.append(f"{request.base}assets/{style_path.name}")

        html = self.template.render(
            app_root_id=APP_ROOT_ID,
            scripts=[f"{request.base}assets/{script_path.name}"],
            styles=style_urls,
        )
        if not html.endswith("\n"):
            html += "\n"
        shell_path = request.out_dir / "index.html"
        shell_path.write_text(html, encoding="utf-8")
        files.append(shell_path)
        return BundleOutput(request.out_dir, tuple(files), shell_path)

    def _build_server(self, request: BundleRequest, modules: list[_Module]) -> BundleOutput:
        entry = next(module for module in modules if module.module_id == request.entry)
        if entry.media_type != PYTHON:
            msg = f"Server entry '{entry.module_id}' must be Python source."
            raise BundleError(msg)
        data = {
            module.module_id: module.source
            for module in modules
            if module.module_id != entry.module_id
        }
        lines = ['"""Generated server bundle."""', "", "MODULES = {"]
        lines.extend(f"    {key!r}: {value!r}," for key, value in data.items())
        lines.extend(["}", "", entry.source.rstrip("\n"), ""])
        entry_path = request.out_dir / SERVER_ENTRY_FILENAME
        entry_path.write_text("\n".join(lines), encoding="utf-8")
        return BundleOutput(request.out_dir, (entry_path,), entry_path)


__all__ = [
    "JAVASCRIPT",
    "JSON_DATA",
    "PYTHON",
    "STYLESHEET",
    "BuildTarget",
    "BundleError",
    "BundleOutput",
    "BundleRequest",
    "Bundler",
    "InProcessBundler",
    "ModulePlugin",
]
