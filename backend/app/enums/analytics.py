"""
Analytics Enums
"""

from enum import Enum


class LearningTrend(str, Enum):
    """
    Direction of recent mastery compared to the sessions before it.

    Calculated by comparing the mean mastery of the most recent window of
    valid sessions against the window before it:
    - delta > threshold: UP
    - delta < -threshold: DOWN
    - else: STEADY
    """

    UP = "up"
    STEADY = "steady"
    DOWN = "down"
