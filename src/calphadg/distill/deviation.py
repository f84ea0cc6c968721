# src/calphadg/distill/deviation.py

"""Deviation functions comparing inferred upper bounds to reference ones."""

from typing import Callable, Union

import numpy as np

DeviationFn = Callable[[np.ndarray, np.ndarray], np.ndarray]


def positive_deviation(inferred: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """max(0, inferred - reference): only overestimated bounds are penalized."""
    return np.maximum(0.0, np.asarray(inferred) - np.asarray(reference))


def squared_deviation(inferred: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """(inferred - reference)²: symmetric penalty."""
    diff = np.asarray(inferred) - np.asarray(reference)
    return diff * diff


DEVIATIONS = {
    "positive": positive_deviation,
    "squared": squared_deviation,
}


def get_deviation(deviation: Union[str, DeviationFn]) -> DeviationFn:
    """Resolve a deviation function by name, or pass a callable through."""
    if callable(deviation):
        return deviation
    if deviation not in DEVIATIONS:
        raise ValueError(f"Unknown deviation {deviation!r}; expected one of {sorted(DEVIATIONS)}")
    return DEVIATIONS[deviation]
