"""Foundation layer: errors, results, configuration."""
