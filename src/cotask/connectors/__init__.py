"""
Collaborators connecting the engine to real-world latency.

Components:
- futures_connector.py: blocking callables on a thread pool
- http_connector.py: HTTP GET via httpx
- asyncio_connector.py: coroutines on an asyncio loop + drive() bridge
"""
