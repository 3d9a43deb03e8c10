"""Enum definitions for equipment service models."""

import enum


class EquipmentCategory(str, enum.Enum):
    BALL = "ball"
    NET = "net"
    UNIFORM = "uniform"
    OTHER_GEAR = "other-gear"


class EquipmentCondition(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNUSABLE = "unusable"


class LoanStatus(str, enum.Enum):
    ACTIVE = "active"
    RETURNED = "returned"
    # Display only: an active loan past its expected return date
    OVERDUE = "overdue"
