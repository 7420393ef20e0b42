"""Keep-alive web server."""
