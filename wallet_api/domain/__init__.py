"""Domain vocabulary (enums, validation rules) free of persistence concerns."""
