"""formguard command line interface."""
