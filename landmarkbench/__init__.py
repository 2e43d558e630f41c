"""
landmarkbench
Ground-truth validation and regression harness for face landmark detection
"""

__version__ = "0.1.0"
