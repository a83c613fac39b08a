"""
Test suite for PyDiffNoise package.

This test suite covers:
- Import tests for all modules and submodules
- Unit tests for individual functions and classes
- Integration tests for complete workflows
- GPU/Taichi functionality tests

Run with: pytest
"""