"""Entry points for LENDKEEP (command line)."""
