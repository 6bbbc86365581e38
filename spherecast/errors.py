"""
Exceptions raised while building or loading a render configuration.
"""


class SceneConfigError(ValueError):
    """Invalid scene or render configuration.

    Raised before any pixel is traced; a render never starts from a
    configuration that failed validation.
    """
    pass
