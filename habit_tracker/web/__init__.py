"""HTTP surface for Habit Tracker."""
