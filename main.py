"""
Alias Scanner Application

Launcher for running from a source checkout: python main.py [--config ...]
"""

from alias_scanner.app import main


if __name__ == "__main__":
    main()
