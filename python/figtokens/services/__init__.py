"""Business logic services.

Services are called by route handlers and orchestrate Figma API calls,
token extraction and database writes.
"""

from figtokens.services.design_files import (
    delete_design_file,
    get_design_file_detail,
    import_file,
    list_design_files,
    parse_file_key,
    sync_file,
)
from figtokens.services.extraction import extract_tokens

__all__ = [
    "delete_design_file",
    "extract_tokens",
    "get_design_file_detail",
    "import_file",
    "list_design_files",
    "parse_file_key",
    "sync_file",
]
