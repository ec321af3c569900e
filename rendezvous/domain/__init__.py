"""Domain areas: matching, notifications, profiles, realtime and scheduling"""
