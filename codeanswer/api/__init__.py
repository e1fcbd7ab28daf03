"""HTTP routers for the codeanswer service."""
