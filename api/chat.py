# Serverless entry point: the host routes /api/chat to the ASGI app exported here.
from main import app  # noqa: F401
