from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from pydantic import BaseModel, Field

from evoarena.exceptions import BrainError, GenomeError

__all__ = ["Layer", "LayerTopology", "Network", "weight_count"]


class LayerTopology(BaseModel):
    neurons: int = Field(gt=0)


def _check_topology(topology: Sequence[LayerTopology]) -> None:
    if len(topology) < 2:
        raise BrainError(
            f"A network needs at least an input and an output layer, got {len(topology)}"
        )


def weight_count(topology: Sequence[LayerTopology]) -> int:
    """Number of genes needed to describe a network (weights plus biases)."""
    _check_topology(topology)
    return sum(
        (prev.neurons + 1) * curr.neurons
        for prev, curr in zip(topology[:-1], topology[1:])
    )


class Layer:
    """Fully connected layer with ReLU activation."""

    def __init__(self, weights: np.ndarray, biases: np.ndarray):
        if weights.ndim != 2 or biases.shape != (weights.shape[0],):
            raise BrainError(
                f"Inconsistent layer shapes: weights={weights.shape}, biases={biases.shape}"
            )
        self.weights = weights
        self.biases = biases

    @property
    def input_size(self) -> int:
        return self.weights.shape[1]

    @property
    def output_size(self) -> int:
        return self.weights.shape[0]

    def propagate(self, inputs: np.ndarray) -> np.ndarray:
        return np.maximum(self.weights @ inputs + self.biases, 0.0)


class Network:
    """Fixed-topology feed-forward network.

    The flat weight layout, per layer and per output neuron, is
    ``[bias, w_1, ..., w_in]``. ``from_weights`` and ``weights`` are inverses.
    """

    def __init__(self, layers: list[Layer]):
        if not layers:
            raise BrainError("Network requires at least one layer")
        for prev, curr in zip(layers[:-1], layers[1:]):
            if prev.output_size != curr.input_size:
                raise BrainError(
                    f"Layer size mismatch: {prev.output_size} -> {curr.input_size}"
                )
        self.layers = layers

    @classmethod
    def random(
        cls, topology: Sequence[LayerTopology], rng: np.random.Generator
    ) -> Network:
        _check_topology(topology)
        layers = [
            Layer(
                weights=rng.uniform(-1.0, 1.0, size=(curr.neurons, prev.neurons)),
                biases=rng.uniform(-1.0, 1.0, size=curr.neurons),
            )
            for prev, curr in zip(topology[:-1], topology[1:])
        ]
        return cls(layers)

    @classmethod
    def from_weights(
        cls, topology: Sequence[LayerTopology], weights: Sequence[float] | np.ndarray
    ) -> Network:
        expected = weight_count(topology)
        flat = np.asarray(weights, dtype=float).ravel()
        if flat.size != expected:
            raise GenomeError(
                f"Got {flat.size} weights, topology requires exactly {expected}"
            )

        layers: list[Layer] = []
        offset = 0
        for prev, curr in zip(topology[:-1], topology[1:]):
            size = (prev.neurons + 1) * curr.neurons
            block = flat[offset : offset + size].reshape(curr.neurons, prev.neurons + 1)
            layers.append(Layer(weights=block[:, 1:].copy(), biases=block[:, 0].copy()))
            offset += size
        return cls(layers)

    @property
    def topology(self) -> list[LayerTopology]:
        return [LayerTopology(neurons=self.layers[0].input_size)] + [
            LayerTopology(neurons=layer.output_size) for layer in self.layers
        ]

    def weights(self) -> np.ndarray:
        return np.concatenate(
            [
                np.column_stack([layer.biases, layer.weights]).ravel()
                for layer in self.layers
            ]
        )

    def propagate(self, inputs: Sequence[float] | np.ndarray) -> np.ndarray:
        x = np.asarray(inputs, dtype=float)
        if x.shape != (self.layers[0].input_size,):
            raise BrainError(
                f"Expected {self.layers[0].input_size} inputs, got shape {x.shape}"
            )
        for layer in self.layers:
            x = layer.propagate(x)
        return x
