"""User-facing frontends for the CHIP-8 interpreter."""

from .app import AppConfig, Chip8App

__all__ = ["AppConfig", "Chip8App"]
