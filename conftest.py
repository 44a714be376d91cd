"""
Pytest bootstrap.
Sets the testing environment before any application module reads settings.
"""
import os

os.environ["TESTING"] = "True"
os.environ["DEBUG"] = "False"
os.environ["SEED_DEMO_DATA"] = "False"
os.environ.setdefault("STORAGE_BACKEND", "memory")
