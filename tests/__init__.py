"""
Test Suite for Pattern Engine

This package contains all tests for the engine components:
- pattern_engine/ - analysis, recommendation and learning modules
- pattern_engine/main.py - HTTP service
"""
