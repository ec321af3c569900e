"""Matching domain - like/unlike/match state transitions"""
