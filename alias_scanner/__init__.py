# Alias Scanner
# Real-time QR / barcode / bank-alias scanning pipeline

__version__ = "1.0.0"
