"""
Tracking package: workouts, unlock sessions, rewards, daily usage and history.
"""
