"""Roost: server-rendered posting site and its request pipeline."""

__version__ = "1.0.0"
