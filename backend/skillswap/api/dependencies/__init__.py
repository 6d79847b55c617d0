"""FastAPI dependencies shared by the versioned routers."""
