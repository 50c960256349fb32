"""CLI module for remnotebridge."""
