"""pyembedkit CLI command implementations."""
