"""
Test suite for eventgallery.

- Unit tests for models, storage backends and services
- CLI task tests
"""
