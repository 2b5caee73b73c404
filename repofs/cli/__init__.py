"""repofs command line interface."""
