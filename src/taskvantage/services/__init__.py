"""Application services: startup wiring, sample data, text capture, templates."""
