"""
pluginopts: static extraction of plugin settings and Nix option generation.
"""

__version__ = "0.1.0"
