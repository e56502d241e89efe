from evoarena.brain.eye import Eye, wrap_angle
from evoarena.brain.network import Layer, LayerTopology, Network, weight_count

__all__ = ["Eye", "Layer", "LayerTopology", "Network", "weight_count", "wrap_angle"]
