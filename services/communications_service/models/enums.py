"""Enum definitions for communications service models."""

import enum


class MessageType(str, enum.Enum):
    ANNOUNCEMENT = "announcement"
    MESSAGE = "message"
    REMINDER = "reminder"


class MessagePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
