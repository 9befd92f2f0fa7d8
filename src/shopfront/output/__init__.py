"""Output layer — Rich/JSON rendering of ServiceResult and view trees."""
