from __future__ import annotations


class PackingError(RuntimeError):
    """Base de los errores del procesador. El mensaje se muestra tal cual al usuario."""


class FileAccessError(PackingError):
    pass


class FormatError(PackingError):
    pass


class ValidationError(PackingError):
    pass


class WriteError(PackingError):
    pass


class DbConnectionError(PackingError):
    pass


class InsertError(PackingError):
    pass
