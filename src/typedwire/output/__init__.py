"""Output layer — formats ServiceResult for terminals and machines."""
