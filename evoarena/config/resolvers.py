import math

from omegaconf import OmegaConf


def register_resolvers() -> None:
    """Custom interpolations available in the YAML configs.

    ``${tau:0.75}`` is a fraction of a full turn in radians, ``${len:...}``
    the length of a list, ``${merge:a,b}`` list concatenation.
    """
    OmegaConf.register_new_resolver("tau", lambda fraction: float(fraction) * 2 * math.pi, replace=True)
    OmegaConf.register_new_resolver("len", lambda arr: len(arr), replace=True)
    OmegaConf.register_new_resolver("merge", lambda x, y: list(x) + list(y), replace=True)
    OmegaConf.register_new_resolver("pi", lambda fraction=1.0: float(fraction) * math.pi, replace=True)
