# typedex/errors.py
# Error kinds raised by the lookup engine. Not-found style errors are recoverable,
# SourceUnavailable is the only terminal one.


class TypedexError(Exception):
    """Base class for everything the engine raises on purpose."""


class UnresolvedIdentifier(TypedexError):
    """A species/type name or id matched nothing, locally or remotely."""

    def __init__(self, raw, canonical=None, kind="species"):
        self.raw = raw
        self.canonical = canonical if canonical is not None else str(raw).strip().lower()
        self.kind = kind
        super().__init__(f"No {kind} matched {raw!r} (tried {self.canonical!r})")


class UnknownTypeName(TypedexError):
    """Input outside the fixed 18-name type taxonomy."""

    def __init__(self, raw, canonical=None, valid=None):
        self.raw = raw
        self.canonical = canonical if canonical is not None else str(raw).strip().lower()
        msg = f"Unknown type {raw!r} (tried {self.canonical!r})"
        if valid:
            msg += f". Use one of: {', '.join(valid)}"
        super().__init__(msg)


class SourceUnavailable(TypedexError):
    """Synced data, cache and the remote service all failed for one record."""

    def __init__(self, kind, identifier, synced_path, cache_path, cause=None):
        self.kind = kind
        self.identifier = identifier
        self.synced_path = synced_path
        self.cache_path = cache_path
        self.cause = cause
        super().__init__(
            f"Could not load {kind} {identifier!r}: not in synced data ({synced_path}), "
            f"not in cache ({cache_path}), remote fetch failed: {cause}"
        )


class MalformedLocalRecord(TypedexError):
    """A synced or cached file exists but does not have the expected shape."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed record at {path}: {reason}")


class InvalidArgument(TypedexError, ValueError):
    """A numeric option was outside its allowed range."""
