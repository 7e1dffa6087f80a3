"""
Algorithms package for the Multi-Resource Safety Checker.
Contains the best-first safety search over resource-allocation configurations.
"""
