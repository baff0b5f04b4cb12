"""Running and cycling workout log anchored to map locations."""
