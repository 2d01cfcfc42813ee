import base64
import binascii
import os
from typing import List, Optional, Tuple, Union

TEXT_ENCODINGS: Tuple[str, ...] = ("utf-8-sig", "utf-8", "cp1252", "latin-1")


def decode_text_bytes(raw: bytes, encodings: Tuple[str, ...] = TEXT_ENCODINGS) -> str:
    """Decode file bytes, trying each encoding in turn."""
    for enc in encodings:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    raise UnicodeDecodeError("utf-8", raw, 0, 1, "Unable to decode text content.")


def decode_upload_contents(contents: Optional[str]) -> str:
    """Turn a browser upload payload (``data:<mime>;base64,<data>``) into text."""
    if not contents:
        raise ValueError("No file content provided.")
    if "," not in contents:
        raise ValueError("Invalid upload payload.")
    _meta, b64 = contents.split(",", 1)
    try:
        raw = base64.b64decode(b64, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid upload payload: {exc}") from exc
    return decode_text_bytes(raw)


def load_text_file(path: str) -> Tuple[str, str]:
    """Read a data file from disk. Returns (display name, text)."""
    with open(path, "rb") as f:
        raw = f.read()
    return os.path.basename(path), decode_text_bytes(raw)


def pair_uploads(
    contents: Union[List[str], str, None],
    filenames: Union[List[str], str, None],
) -> List[Tuple[str, str]]:
    """Zip Dash upload contents with their filenames.

    Single uploads arrive as scalars, multi-file uploads as lists. Payloads
    stay encoded so one broken file can be reported on its own.
    """
    if contents is None:
        return []
    if isinstance(contents, str):
        contents = [contents]
    if filenames is None or isinstance(filenames, str):
        filenames = [filenames] * len(contents)
    out: List[Tuple[str, str]] = []
    for idx, payload in enumerate(contents):
        name = filenames[idx] if idx < len(filenames) and filenames[idx] else f"Dataset {idx + 1}"
        out.append((str(name), payload))
    return out
