"""Domain enums shared by storage and the route layer."""
