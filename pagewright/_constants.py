"""Common literal values used across pagewright.

These constants keep directory names, file suffixes, and synthetic module
identifiers centralized so the catalog, the build entries, and tests can
import the same values without drifting. Intended for internal use within the
pagewright package.

Examples
--------
>>> from pagewright import _constants
>>> _constants.TOOL_DIR
'.pagewright'
>>> _constants.ROUTES_MODULE_ID.startswith("virtual:")
True
"""

TOOL_DIR = ".pagewright"
CONFIG_FILENAMES = ("config.yaml", "config.yml")
DEFAULT_OUT_DIR = f"{TOOL_DIR}/dist"
STAGING_DIRNAME = ".build"

MARKDOWN_SUFFIXES = (".md", ".mdx")
IGNORED_DIRS = frozenset(
    {"node_modules", ".git", ".venv", "venv", "__pycache__", "site-packages"}
)

ROUTES_MODULE_ID = "virtual:pagewright/routes"
CONFIG_MODULE_ID = "virtual:pagewright/config"
SEARCH_MODULE_ID = "virtual:pagewright/search"
STYLES_MODULE_ID = "virtual:pagewright/styles"
CLIENT_ENTRY_ID = "virtual:pagewright/entry-client"
SERVER_ENTRY_ID = "virtual:pagewright/entry-server"

SERVER_ENTRY_FILENAME = "server_entry.py"
APP_ROOT_ID = "app"
