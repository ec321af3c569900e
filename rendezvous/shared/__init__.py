"""Helpers shared across domain areas"""
