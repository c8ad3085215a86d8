# Core module for Alias Scanner
# Contains capability interfaces, their implementations, and the
# real-time frame-classification pipeline
