"""
Integration tests for filmfolio.

These tests drive the real FastAPI app end to end:
- Real Application container and services (not mocked)
- Real bcrypt hashing and Pillow image processing
- Real JSON documents and upload files in temp directories
"""
