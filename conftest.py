"""Global pytest configuration."""

import os

# Keep tests on the in-memory fallback with no simulated latency and no remote
os.environ.setdefault("FALLBACK_BACKEND", "memory")
os.environ.setdefault("FALLBACK_LATENCY_MS", "0")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")
os.environ.pop("MONGO_URL", None)
os.environ.pop("MONGO_API_KEY", None)
