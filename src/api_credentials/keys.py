"""Private key materialization."""

import errno
import os
from typing import Optional, Union

import structlog

from .audit import EventType, audit_event
from .errors import ConfigurationError

logger = structlog.get_logger(__name__)

PrivateKeySource = Union[str, bytes, bytearray, memoryview, os.PathLike]

# Errors meaning "no file by that name"; inline PEM text commonly hits these
_NOT_A_FILE_ERRNOS = frozenset({errno.ENOENT, errno.ENAMETOOLONG})


def _read_key_file(
    path: Union[str, os.PathLike], allow_missing: bool = False
) -> Optional[bytes]:
    """Read a key file whole.

    Args:
        path: Location of the key file.
        allow_missing: Return None instead of raising when nothing can exist
            under that name.

    Returns:
        The raw file contents, or None for a missing file when allowed.

    Raises:
        ConfigurationError: If the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except ValueError as e:
        # Embedded NUL byte: not a usable file name
        if allow_missing:
            return None
        raise ConfigurationError(f"Invalid private key path: {e}") from e
    except OSError as e:
        if allow_missing and e.errno in _NOT_A_FILE_ERRNOS:
            return None
        audit_event(
            event_type=EventType.KEY_LOAD_FAILED,
            subject=os.fspath(path),
            success=False,
            error=e,
        )
        if isinstance(e, FileNotFoundError):
            raise ConfigurationError(f"Private key file {os.fspath(path)!r} not found") from e
        raise ConfigurationError(f"Unable to read private key file {os.fspath(path)!r}: {e}") from e

    audit_event(
        event_type=EventType.KEY_LOAD,
        subject=os.fspath(path),
        success=True,
        details={"size": len(data)},
    )
    return data


def resolve_private_key(source: Optional[PrivateKeySource]) -> Optional[bytes]:
    """Turn a private key reference into key bytes.

    A string is first read as a file. Only when no file exists under that
    name is the string itself taken as the key content (inline PEM text,
    for instance); any other filesystem failure is fatal. The bytes are not
    checked for being a usable key.

    Args:
        source: None, raw key bytes, a path-like object, or a string that is
            either a path or the key content.

    Returns:
        The key bytes, or None when no source was given.

    Raises:
        ConfigurationError: If a key file cannot be read for a reason other
            than not existing, a path-like source names a missing file, or
            the source type is not supported.
    """
    if source is None:
        return None

    if isinstance(source, bytes):
        return source

    if isinstance(source, (bytearray, memoryview)):
        return bytes(source)

    if isinstance(source, str):
        data = _read_key_file(source, allow_missing=True)
        if data is not None:
            return data
        logger.debug("private_key_from_literal", size=len(source))
        return source.encode("utf-8")

    if isinstance(source, os.PathLike):
        return _read_key_file(source)

    raise ConfigurationError(
        f"Unsupported private key type: {type(source).__name__}"
    )
