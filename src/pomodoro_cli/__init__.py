"""Pomodoro CLI - a terminal Pomodoro session tracker."""

__version__ = "0.1.0"
