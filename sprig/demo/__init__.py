"""Demo application wired by the container."""
