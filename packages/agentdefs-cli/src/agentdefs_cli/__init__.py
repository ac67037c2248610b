"""agentdefs command line interface."""
