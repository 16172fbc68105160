"""LENDKEEP command-line interface."""
