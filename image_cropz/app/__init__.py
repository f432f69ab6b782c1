"""Qt-facing state objects for the crop UI."""
