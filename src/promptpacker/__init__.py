from promptpacker.packer import PackResult, pack_directory, select_entries
from promptpacker.pipeline.types import PackOptions

__all__ = [
    "PackOptions",
    "PackResult",
    "pack_directory",
    "select_entries",
]
