"""Middleend package - analyses over inferred programs and type tables."""
