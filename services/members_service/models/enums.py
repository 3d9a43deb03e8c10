"""Enum definitions for members service models."""

import enum


class PlayerPosition(str, enum.Enum):
    """Court position a member usually plays."""

    SETTER = "setter"
    OUTSIDE_HITTER = "outside_hitter"
    MIDDLE_BLOCKER = "middle_blocker"
    OPPOSITE = "opposite"
    LIBERO = "libero"
