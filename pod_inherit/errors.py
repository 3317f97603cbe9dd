"""Exception taxonomy for the inherited-methods generator."""


class PodInheritError(Exception):
    """Base class for all errors raised while generating inherited POD."""


class ConfigError(PodInheritError):
    """Raised when the configuration surface holds an invalid value."""


class MalformedSourceError(PodInheritError):
    """Raised when a source unit has no package declaration."""


class ResolutionError(PodInheritError):
    """Raised when an ancestor or forced class cannot be loaded or ordered."""


class AttributionError(PodInheritError):
    """Raised on an unexpected failure while probing member callability."""


class MalformedSectionError(PodInheritError):
    """Raised when generated section markup would not re-parse cleanly."""


class AccessError(PodInheritError):
    """Raised when an output path cannot be written."""
