class ConfigError(ValueError):
    """Invalid knowledge base or responder configuration."""


class AiUnavailable(RuntimeError):
    """The AI responder is missing, unconfigured, timed out or failed."""
