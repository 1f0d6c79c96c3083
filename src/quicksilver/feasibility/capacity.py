"""
Capacity ledger: arithmetic and fit checks over optional :class:`Capacity`.

Absence has a different meaning per argument, and the two rules must not be
merged into a single "None means unlimited" shortcut:

* an absent *demand* always fits;
* an absent *container* behaves as zero capacity, so only a zero demand fits.
"""

from typing import Optional

from quicksilver.core_types import Capacity


def add_capacity(a: Optional[Capacity], b: Optional[Capacity]) -> Optional[Capacity]:
    """Component-wise sum. An absent operand leaves the other one unchanged."""
    if a is None:
        return b
    if b is None:
        return a
    return Capacity(volume=a.volume + b.volume, weight=a.weight + b.weight)


def can_fit(container: Optional[Capacity], demand: Optional[Capacity]) -> bool:
    """Whether ``demand`` fits within ``container`` in both dimensions."""
    if demand is None:
        return True
    if container is None:
        return demand.volume == 0 and demand.weight == 0
    return container.volume >= demand.volume and container.weight >= demand.weight
