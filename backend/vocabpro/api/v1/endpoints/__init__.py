"""Version 1 endpoint routers."""
