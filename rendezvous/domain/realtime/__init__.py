"""Realtime domain - live channel registry and websocket transport"""
