"""Notifications domain - persisted notifications and live fan-out"""
