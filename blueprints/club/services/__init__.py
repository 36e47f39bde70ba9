"""Business logic for the club blueprint."""
