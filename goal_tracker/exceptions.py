"""
Custom exceptions for the goal tracker application.
Provides specific exception types for better error handling and recovery.
"""


class GoalTrackerException(Exception):
    """Base exception for goal tracker application"""
    pass


class GoalNotFoundException(GoalTrackerException):
    """Raised when a goal is not found"""
    def __init__(self, goal_id: str):
        self.goal_id = goal_id
        super().__init__(f"Goal with ID {goal_id} not found")


class InvalidTimeFormatException(GoalTrackerException):
    """Raised when time format is invalid"""
    def __init__(self, time_str: str):
        self.time_str = time_str
        super().__init__(f"Invalid time format: {time_str}. Expected HH:MM")


class DatabaseException(GoalTrackerException):
    """Raised when database operations fail"""
    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Database {operation} failed: {details}")


class DataImportException(GoalTrackerException):
    """Raised when an import document cannot be applied"""
    def __init__(self, message: str):
        self.reason = message
        super().__init__(f"Import failed: {message}")


class ValidationException(GoalTrackerException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
