"""Foundation layer: errors and configuration."""
