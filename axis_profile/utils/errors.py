"""
Custom exception types for axis_profile.
Keep this focused and non-redundant; prefer built-ins where appropriate.
"""


class InvalidConstraints(ValueError):
    """Kinematic limits that cannot define a profile (non-positive or non-finite)."""

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"Invalid Constraints: {message}")

    def __str__(self):
        return f"Invalid Constraints: {self.original_message}"
