"""
Entry point for running remnotebridge as a module: python -m remnotebridge
"""

from remnotebridge.cli.commands import app

if __name__ == "__main__":
    app()
