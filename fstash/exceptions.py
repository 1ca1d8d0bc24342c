"""Exceptions for fstash."""


class FStashError(Exception):
    """Base class for every error raised by fstash itself.

    Filesystem failures are not wrapped; they surface as the
    ``fs.errors.FSError`` subclass raised by the backing filesystem.
    """


class InvalidName(FStashError, ValueError):
    """Raised when a stash name contains anything other than letters, digits,
    ``-`` or ``_`` after normalization.
    """

    def __init__(self, name):
        super().__init__("invalid stash name: {0!r}".format(name))
        self.name = name


class SourceNotFound(FStashError):
    """Raised when the directory to walk does not exist."""

    def __init__(self, path):
        super().__init__("directory does not exist: {0}".format(path))
        self.path = path


class StashNotExist(FStashError):
    """Raised when a stash is addressed that has no storage directory."""

    def __init__(self, name):
        super().__init__("stash does not exist: {0}".format(name))
        self.name = name


class TemplateError(FStashError):
    """Base class for failures while rendering a file during expansion."""

    def __init__(self, path, message):
        super().__init__("{0}: {1}".format(path, message))
        self.path = path


class TemplateDataError(TemplateError):
    """Template data for a file is not a JSON object."""


class TemplateSyntaxError(TemplateError):
    """File content could not be parsed as a template."""


class TemplateRenderError(TemplateError):
    """Template failed while rendering against its data."""
