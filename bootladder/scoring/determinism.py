"""Determinism utilities for reproducible ladder runs.

This module ensures that a seeded ladder call is fully reproducible:
1. Every random draw comes from an explicit, seeded generator
2. Child generators are spawned from one SeedSequence, never from a global source
3. Deterministic hashing of distributions for audit comparison

Runs with the same inputs, parameters and seed MUST produce identical
distributions, however many workers evaluate them.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, List, Optional

import numpy as np
from numpy.typing import NDArray

from .types import InvalidParameters


# ─────────────────────────────────────────────────────────────────────────────
# Seeding
# ─────────────────────────────────────────────────────────────────────────────


def make_seed_sequence(
    seed: int | np.random.SeedSequence | None = None,
) -> np.random.SeedSequence:
    """Build the root SeedSequence for a call.

    Args:
        seed: Non-negative integer, an existing SeedSequence, or None for
            fresh OS entropy (non-reproducible)

    Returns:
        SeedSequence to spawn children from

    Raises:
        InvalidParameters: If the seed is negative or not an integer
    """
    if seed is None:
        return np.random.SeedSequence()
    if isinstance(seed, np.random.SeedSequence):
        return seed
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise InvalidParameters(f"seed must be a non-negative integer, got {seed!r}")
    if seed < 0:
        raise InvalidParameters(f"seed must be non-negative, got {seed}")
    return np.random.SeedSequence(int(seed))


def spawn_seed_sequences(
    seed: int | np.random.SeedSequence | None,
    n_children: int,
) -> List[np.random.SeedSequence]:
    """Spawn independent child SeedSequences from a root seed."""
    return make_seed_sequence(seed).spawn(n_children)


def make_generator(seed: int | np.random.SeedSequence | None = None) -> np.random.Generator:
    """Create a PCG64 generator from a seed or SeedSequence."""
    return np.random.default_rng(make_seed_sequence(seed))


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a float to a range."""
    return max(min_val, min(value, max_val))


# ─────────────────────────────────────────────────────────────────────────────
# Deterministic Hashing
# ─────────────────────────────────────────────────────────────────────────────


def _serialize_for_hash(obj: Any) -> Any:
    """Recursively serialize an object for hashing."""
    if isinstance(obj, np.ndarray):
        return [_serialize_for_hash(v) for v in obj.tolist()]
    elif isinstance(obj, (np.floating, float)):
        return repr(float(obj))
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, dict):
        return {str(k): _serialize_for_hash(v) for k, v in sorted(obj.items())}
    elif isinstance(obj, (list, tuple)):
        return [_serialize_for_hash(v) for v in obj]
    else:
        return obj


def compute_hash(data: Any) -> str:
    """Compute a deterministic SHA256 hash of a JSON-like structure.

    Floats are hashed through ``repr`` so that bit-identical values,
    and only those, hash the same.
    """
    serialized = _serialize_for_hash(data)
    canonical = json.dumps(serialized, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


def compute_distribution_hash(
    scores: NDArray[np.float64],
    label: Optional[str] = None,
) -> str:
    """Hash a score distribution, optionally tagged with a label."""
    payload = {"label": label, "n": int(len(scores)), "scores": scores}
    return compute_hash(payload)


__all__ = [
    "make_seed_sequence",
    "spawn_seed_sequences",
    "make_generator",
    "clamp",
    "compute_hash",
    "compute_distribution_hash",
]
