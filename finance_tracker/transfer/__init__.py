"""Import and export of the tracker's JSON file format."""

from finance_tracker.transfer.json_codec import (
    decode_import,
    encode_export,
    export_filename,
)

__all__ = ["decode_import", "encode_export", "export_filename"]
