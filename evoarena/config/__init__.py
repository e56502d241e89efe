from evoarena.config.helpers import build_storage, build_tracker, build_writer
from evoarena.config.resolvers import register_resolvers

__all__ = ["build_storage", "build_tracker", "build_writer", "register_resolvers"]
